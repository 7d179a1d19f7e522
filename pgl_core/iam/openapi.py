from drf_spectacular.extensions import OpenApiAuthenticationExtension


class CookieOrHeaderJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "pgl_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "BearerOrSessionCookie"

    def get_security_definition(self, auto_schema):
        # Documented as Bearer JWT; the __session cookie is accepted as well.
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Identity provider session token via `Authorization: Bearer <token>` "
                "or the `__session` cookie. The role is read from the token's "
                "`metadata.role` claim."
            ),
        }
