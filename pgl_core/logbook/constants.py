# pgl_core/logbook/constants.py
"""
Logbook catalogues: case categories with their sub-types, procedure and
imaging categories with target counts, rotation postings and clinical skills,
plus the rating scales used by the entry forms.
"""
from __future__ import annotations

from typing import NamedTuple

from django.db import models


class CaseCategory(NamedTuple):
    code: str
    label: str
    sub_categories: tuple[str, ...]


class ProcedureCategory(NamedTuple):
    code: str
    label: str
    max_entries: int
    is_cpr: bool = False


class ImagingCategory(NamedTuple):
    code: str
    label: str
    max_entries: int


class RotationPosting(NamedTuple):
    sl_no: int
    name: str
    is_elective: bool


# -------------------------
# Rating scales
# -------------------------
class CompetencyLevel(models.TextChoices):
    CBD = "CBD", "Case Based Discussion"
    S = "S", "Simulation"
    O = "O", "Observed"
    MS = "MS", "Managed under Supervision"
    MI = "MI", "Managed Independently"


class SkillLevel(models.TextChoices):
    S = "S", "Simulation"
    O = "O", "Observed"
    A = "A", "Assisted"
    PS = "PS", "Performed under Supervision"
    PI = "PI", "Performed Independently"
    TM = "TM", "Team Member"
    TL = "TL", "Team Leader"


STANDARD_SKILL_LEVELS = frozenset({"S", "O", "A", "PS", "PI"})
CPR_SKILL_LEVELS = frozenset({"S", "TM", "TL"})


class ConfidenceLevel(models.TextChoices):
    VC = "VC", "Very Confident"
    FC = "FC", "Fairly Confident"
    SC = "SC", "Slightly Confident"
    NC = "NC", "Not Confident"


class PatientCategory(models.TextChoices):
    ADULT_NON_TRAUMA = "ADULT_NON_TRAUMA", "Adult / Non-Trauma"
    ADULT_TRAUMA = "ADULT_TRAUMA", "Adult / Trauma"
    PEDIATRIC_NON_TRAUMA = "PEDIATRIC_NON_TRAUMA", "Pediatric / Non-Trauma"
    PEDIATRIC_TRAUMA = "PEDIATRIC_TRAUMA", "Pediatric / Trauma"
    OTHER = "OTHER", "Other"


class SkillPopulation(models.TextChoices):
    ADULT = "ADULT", "Adult"
    PEDIATRIC = "PEDIATRIC", "Pediatric"


class DiagnosticCategory(models.TextChoices):
    ABG_ANALYSIS = "ABG_ANALYSIS", "ABG Analysis"
    ECG_ANALYSIS = "ECG_ANALYSIS", "ECG Analysis"
    OTHER_DIAGNOSTIC = "OTHER_DIAGNOSTIC", "Other Diagnostics"


# -------------------------
# Case management: 24 categories
# -------------------------
CASE_CATEGORIES: tuple[CaseCategory, ...] = tuple(
    CaseCategory(code, label, subs)
    for code, label, subs in (
    ("RESUSCITATION", "Resuscitation", (
        "Acute Airway Obstruction",
        "Anaphylaxis/ Anaphylactic Schock",
        "Unresponsive Patient",
        "Acute Respiratory Distress/ Respiratory Arrest",
        "Cardio-Respiratory Arrest",
        "Patient in shock Hemorrhage",
        "Patient in shock -- Hypovolemic",
        "Obstructive Shock",
        "Distributive Shock/ Septic Shock",
        "Choking Victim-adult pediatric",
    )),
    ("RESUSCITATION_SPECIAL", "Resuscitation in Special Circumstances", (
        "Cardio-respiratory arrest in Pregnant patient",
        "Neuroprotective Resuscitation",
        "Damage Control Resuscitation",
        "Massive Transfusion",
        "Abdominal Compartment Syndrome",
        "Morbidly obese patient",
        "Immunocompromised post-transplant patient",
        "Pain Assessment and Management",
        "Ascertaining brain death",
        "Care of a patient of organ donation",
    )),
    ("CARDIOVASCULAR", "Cardiovascular Emergencies", (
        "Case of Chest Pain",
        "Case of Breathlessness",
        "Case of Palpitations",
        "Case of transient loss of Consciousness",
        "Acute Coronary Syndrome (ACS)",
        "ACS with mechanical complications",
        "Acute Heart Failure",
        "Tachy-arrhythmia",
        "Brady arrhythmia",
        "Acute Pericarditis",
        "Cardiac Tamponade",
        "Valvular Heart Diseases",
        "Prosthetic Heart Valve Disease",
        "Acute Myocarditis",
        "Acute Rheumatic Fever",
        "Infective Endocarditis",
        "Hypertensive urgency & Emergencies",
        "Pacemaker related emergencies",
        "Pulmonary Embolism",
        "Patient with RV dysfunction",
    )),
    ("VASCULAR", "Vascular Emergencies", (
        "Aortic Dissection",
        "Aortic Aneurysmal Disease",
        "Acute limb Ischemia",
        "Peripheral Vascular disease emergencies",
        "Deep vein thrombosis",
    )),
    ("RESPIRATORY", "Respiratory Emergencies", (
        "Case of Dyspnoea/ Cough",
        "Case of Hemoptysis",
        "Acute Exacerbation of COPD",
        "Acute severe Asthma",
        "Respiratory failure/ ARDS",
        "Pneumonia & Chest infections",
        "Spontaneous Pneumothorax",
        "Pleural effusion/ Empyema",
        "Mediastinitis & causes",
        "Foreign body in respiratory tract",
    )),
    ("NEUROLOGICAL", "Neurological Emergencies", (
        "Acute stroke -- anterior circulation",
        "Acute stroke -- posterior circulation",
        "Transient Ischemic attack",
        "CNS Hemorrhage",
        "Case of Seizure/ status epilepticus",
        "Case of headache",
        "Case of acute altered mental status/ coma",
        "Case of Vertigo/ Dizziness",
        "Case of cranial nerve palsy",
        "Meningitis/ Encephalitis",
        "Cavernous sinus thrombosis",
        "Case of ascending/ descending paralysis",
        "Compressive myelopathy",
        "Non-compressive myelopathy",
        "Myasthenia crisis",
        "Acute peripheral neuropathy/ Monopoiesis",
        "Parkinson's Disease/ other movement disorders",
        "Multiple Sclerosis",
        "CNS Tumours related emergencies",
        "VP shunt related emergencies",
    )),
    ("INFECTIOUS", "Infectious Emergencies", (
        "Fever evaluation",
        "Tropical infections",
        "Patient with Sepsis/ Septic shock/ MODS",
        "Case of HIV infection",
        "Case of Tuberculosis",
        "Respiratory Infections",
        "Gastrointestinal Infections",
        "Varicella & Zoster",
        "Hemorrhage fever",
        "Acute viral hepatitis",
        "Tetanus",
        "Rabies",
        "Toxic shock Syndrome",
        "Gas gangrene & Anaerobic infections",
        "Skin & Soft tissue infections",
        "Parasitic infestations",
        "Sexually transmitted infections",
        "Needle stick injury",
        "Infections in Immunocompromised",
        "Hospital acquired infections",
    )),
    ("METABOLIC_ENDOCRINE", "Metabolic and Endocrine Emergencies", (
        "Diabetic Emergencies- Hypoglycemia",
        "Diabetic Keto-acidosis",
        "Hyperosmolar-hyperglycemic coma",
        "Thyrotoxicosis",
        "Myxoedema Coma",
        "Adrenal Disorders",
        "Pituitary Disorders",
        "Diabetic foot and other diabetic complications",
        "Hyponatremia evaluation",
        "Hypernatremia evaluation",
        "Hypocalcemia",
        "Hypercalcemia",
        "Hyper/ Hypokalemia",
        "Acid-base disturbances",
        "Renal tubular acidosis",
    )),
    ("TOXICOLOGICAL_ENVIRONMENTAL", "Toxicological & Environmental Emergencies", (
        "Unknown toxin ingestion/ Toxidrome",
        "Insecticides & Pesticides",
        "Ethanol & other toxic alcohol",
        "Opioids",
        "Plant toxins",
        "Hydrocarbons & Kerosene poisoning",
        "Corrosive Ingestion",
        "Carbon Monoxide, Cyanide",
        "Methemoglobinemia",
        "Heavy metal toxicity",
        "Hazardous chemicals/ Industrial chemicals",
        "Prescription drug overdose",
        "Beta blocker/ Calcium channel blocker overdose",
        "Paracetamol overdose",
        "Serotonin Syndrome",
        "Neuroleptic Malignant Syndrome",
        "Battery Ingestion",
        "Snake Bite",
        "Scorpion Envenomation",
        "Bee sting/ other insect bite",
        "Animal Bite",
        "Heat Stroke/ Heat exhaustion",
        "Hypothermia/ Cold injuries/ Frost bite",
        "High altitude illness",
        "Diving related emergencies",
        "Drowning",
    )),
    ("HEMATOLOGICAL", "Hematological Emergencies", (
        "Case of Severe Anemia",
        "Thrombocytopenia/ Pancytopenia",
        "Bleeding Disorders/ Hemophilia",
        "Disseminated Intra vascular coagulation",
        "Bleeding in patients on anticoagulation",
        "Sickle cell disease/ crisis",
        "Transfusion reaction",
        "Acute Hematological malignancy",
        "Febrile Neutropenia",
        "Hematopoietic stem cell transplant patient",
    )),
    ("ONCOLOGY_PALLIATIVE", "Oncology & Palliative Care Emergencies", (
        "Hyper leukocytosis syndrome",
        "Tumor lysis Syndrome",
        "Superior Venacava Syndrome",
        "Acute upper airway obstruction in oncology",
        "Acute tumor bleeding",
        "Tumor related Cord compression",
        "Metastatic emergencies/ SIADH/ Hypercalcemia",
        "Advanced malignancy- discussing goals of care",
        "Provision of palliative care in EM",
        "End of life care/ care of dying patient",
    )),
    ("PSYCHIATRIC_PSYCHOSOCIAL", "Psychiatric & Psycho-Social Emergencies", (
        "Acute agitated/ Violent patient in ED",
        "Anxiety & Somatoform disorders",
        "Delirium/ Psychosis",
        "Deliberate self-harm/ Suicide",
        "Alcohol substance use/ I V Drug abuse",
        "Acute psychosis -- Bipolar/ Schizophrenia",
        "Thought & mood disorders/ Depression",
        "Eating disorders",
        "Intimate partner violence/ Sexual abuse",
        "Trans-gender patient",
    )),
    ("GERIATRIC", "Geriatric Emergencies", (
        "Compressive geriatric assessment",
        "Dementia/ Delirium",
        "Evaluation of falls in elderly",
        "Mobility assessment in elderly",
        "Acute confusion in elderly",
        "Polypharmacy",
        "Fragility fractures/ Osteoporosis",
        "Elder abuse",
    )),
    ("DERMATOLOGICAL", "Dermatological Emergencies", (
        "Urticaria/ Eczema",
        "Cutaneous drug reaction/ DRESS",
        "Steven Johnson Syndrome",
        "Toxic Epidermal Necrolysis",
        "Bullous disorders of skin",
        "Skin manifestation of Systemic illness",
        "Exanthemas/ Purpuric rash",
        "Skin & Soft tissue infections",
        "Male/ Female genital lesions",
        "Pressure sores",
    )),
    ("RHEUMATOLOGICAL_ORTHOPEDIC", "Rheumatological & Non-Traumatic Orthopedic Emergencies", (
        "Acute Vasculitis",
        "Anti- Phospholipid Antibody Syndrome",
        "Kawasaki Disease",
        "Rheumatological disease of vital organs",
        "Immune therapy related emergencies",
        "Acute neck pain",
        "Acute back pain",
        "Spinal infections",
        "Spinal epidural abscess/ hematoma",
        "Cauda equina syndrome & differentials",
        "Acute joint pain & swelling",
        "Acute osteomyelitis",
        "Septic arthritis",
        "Crystal arthropathy/ Gour",
        "Limb pain & swelling/ Tumor",
        "Nerve palsy- Upper limb",
        "Nerve palsy- lower limb",
        "Hand & foot space infection",
        "Bursitis/ Enthesitis",
        "Prosthesis related emergencies",
    )),
    ("NEPHROLOGY_UROLOGY", "Emergencies in Nephrology & Urology", (
        "Acute Kidney injury",
        "Chronic Kidney disease complications",
        "Urinary tract infections",
        "Acute prostatitis",
        "Acute pyelonephritis/ perinephric abscess",
        "Post-renal transplant patient",
        "Case of Hematuria",
        "Acute urinary retention",
        "Nephrolithiasis",
        "Obstructive Uropathy",
        "Acute scrotal/ testicular pain",
        "Torsion testes",
        "Phimosis/ paraphimosis",
        "Priapism",
        "Injury to bladder/ urethra/ testes/ penis",
        "Sexually transmitted infections",
    )),
    ("GASTROENTEROLOGY_HEPATIC", "Gastroenterology & Hepatic Emergencies", (
        "Hepatitis/ Acute Liver failure",
        "Emergencies in Chronic liver disease",
        "Alcoholic Liver disease",
        "Upper GI Bleed- Variceal/ Non Variceal",
        "Lower GI Bleed",
        "Inflammatory Bowel disease",
        "Liver Abscess/ Abdominal infections",
        "Acute pancreatitis",
        "Acute Cholangitis",
        "Non-surgical causes of pain abdomen",
    )),
    ("SURGICAL", "Surgical Emergencies", (
        "Pain abdomen -- Bowel obstruction/ Volvulus",
        "Pain abdomen -- Surgical Perforation peritonitis",
        "Pain abdomen- cholecystitis/ appendices",
        "Mesenteric Ischemia",
        "Abdominal distension/ mass",
        "GI Malignancy related emergencies",
        "Hernia related emergencies",
        "Ano-rectal abscess",
        "Rectal prolapse",
        "Cellulitis/ Necrotizing Fasciitis",
    )),
    ("OBSTETRICS_GYNECOLOGICAL", "Obstetrics & Gynaecological Emergencies", (
        "Case of lower abdominal pain",
        "Vaginal bleeding -- non-pregnant female",
        "Vaginal bleeding -- pregnant female",
        "Ectopic pregnancy",
        "Abortion",
        "Antepartum hemorrhage",
        "Pre-eclampsia/ Eclampsia",
        "HELLP",
        "Patient in labour",
        "Hyperemesis Gravidarum",
        "Exposure to infections in pregnancy",
        "Post-partum hemorrhage",
        "Puerperal Sepsis",
        "Vaginal discharge/ Pelvic Infections/ STI",
        "Emergency contraception",
        "Female genital injury/ foreign body",
        "Ovarian Hyper stimulation Syndrome",
        "Gynecologic malignancy emergency",
    )),
    ("ENT", "ENT Emergencies", (
        "Upper airway obstruction/ stridor",
        "Epistaxia",
        "Acute throat pain-evaluation",
        "Foreign body ENT",
        "Acute ear pain/ discharge/ ASOM/CSOM",
        "Acute hearing loss/ Vertigo",
        "Acute sinusitis",
        "Tracheostomy emergencies",
        "Isolated facial palsy",
        "Salivary gland diseases",
    )),
    ("OCULAR", "Ocular Emergencies", (
        "Acute Red Eye",
        "Painful loss of vision",
        "Painless loss of vision",
        "Orbital cellulitis",
        "Foreign body -- eye",
        "Blunt ocular trauma",
        "Penetrating ocular trauma",
        "Chemical injury to eye",
        "Acute glaucoma",
        "Case of acute diplopia",
    )),
    ("TRAUMA", "Trauma", (
        "Evaluation & Resuscitation of Trauma patients",
        "Head injury- minor",
        "Head injury- moderate to severe",
        "Neck injury- blunt/ penetrating",
        "Blunt thoracic trauma",
        "Penetrating thoracic trauma",
        "Blunt abdominal trauma",
        "Penetrating abdominal trauma",
        "Pelvic injury -- male",
        "Pelvic injury- female",
        "Spine injury",
        "Maxillofacial injury",
        "Major Vascular injury",
        "Joint Injury",
        "Extremity Trauma -- upper limb",
        "Extremity Trauma -- lower limb",
        "Compartment syndrome",
        "Burns/ Inhalational injury",
        "Electrical burns",
        "Blast injuries",
        "Hand injuries",
        "Amputated digit/limb",
        "Other soft-tissues/ Musculo-tendinous injury",
        "Trauma in elderly",
        "Trauma Pregnancy",
        "Pediatric Trauma",
        "Fat embolism",
        "Dental injuries",
        "Traumatic cardiac arrest- blunt trauma",
        "Traumatic cardiac arrest- penetrating trauma",
    )),
    ("FORENSIC_DISASTER", "Emergencies: Forensic Aspects and Disaster", (
        "Medico-legal examinations",
        "Wound examinations/ Grievous injury",
        "Brought dead patient/ Signs of death",
        "Hanging",
        "Homicidal injuries",
        "Case of bullet injury",
        "Examination of victim & accused of Rape",
        "Medical responses to terrorist incident",
        "CBRN Event",
        "Mass gathering related emergency",
    )),
    ("PEDIATRIC", "Pediatric Emergencies", (
        "Assessment & care of new-born",
        "Neonatal resuscitations",
        "Care of preterm new-born",
        "Neonatal sepsis",
        "Neonatal jaundice",
        "Assessment of a sick child/ Child in shock",
        "Pediatric cardio-respiratory arrest",
        "Fever in children",
        "Croup/epiglottitis/ upper airway infections",
        "LRTI/ Pneumonia",
        "Asthma/ Bronchiolitis",
        "Foreign body ingestion",
        "Childhood exanthems",
        "Sepsis in children",
        "Gastro-enteritis/ Dehydration",
        "Meningitis/ encephalitis/ CNS infections",
        "Seizure in a child",
        "Cyanotic congenital heart diseases",
        "Acyanotic congenital heart diseases",
        "Pain abdomen in children",
        "Surgical abdomen in children",
        "Pediatric DKA",
        "Unconscious child",
        "Child with poisoning/ Toxin ingestion",
        "Evaluation of a child with incessant crying",
        "Child with failure to thrive/ malnutrition",
        "Limping child/ Painful limb",
        "Pediatric procedural sedation",
        "BRUE/SUDIC (ALTE/SIDS)",
        "Child abuse- physical/sexual",
    )),
    )
)


# -------------------------
# Procedures: target counts per category
# -------------------------
PROCEDURE_CATEGORIES: tuple[ProcedureCategory, ...] = (
    ProcedureCategory("AIRWAY_ADULT", "Airway Management - Adult", 90),
    ProcedureCategory("AIRWAY_ADULT_ALTERNATIVE", "Airway Management - Adult Alternative", 20),
    ProcedureCategory("AIRWAY_PEDIATRIC_NEONATAL", "Airway Management - Pediatric & Neonatal", 30),
    ProcedureCategory("BREATHING_VENTILATOR", "Breathing & Ventilator Management", 50),
    ProcedureCategory("NEEDLE_THORACOCENTESIS_ICD", "Needle Thoracocentesis / ICD", 15),
    ProcedureCategory("PERIPHERAL_IV_ADULT", "Peripheral IV Access - Adult", 40),
    ProcedureCategory("PERIPHERAL_IV_PEDIATRIC", "Peripheral IV Access - Pediatric", 20),
    ProcedureCategory("CENTRAL_IV", "Central IV Access", 20),
    ProcedureCategory("CENTRAL_IV_PICC", "Central IV / PICC Line", 5),
    ProcedureCategory("ARTERIAL_PUNCTURE_ABG", "Arterial Puncture & ABG", 50),
    ProcedureCategory("INTRAOSSEOUS_VENOUS_CUTDOWN", "Intraosseous / Venous Cutdown", 5),
    ProcedureCategory("HEMODYNAMIC_MONITORING_CVP", "Hemodynamic Monitoring / CVP", 10),
    ProcedureCategory("CARDIOVERSION_DEFIBRILLATION_ADULT", "Cardioversion / Defibrillation - Adult", 10),
    ProcedureCategory("CARDIOVERSION_DEFIBRILLATION_PEDIATRIC", "Cardioversion / Defibrillation - Pediatric", 5),
    ProcedureCategory("CPR_ADULT", "CPR - Adult", 30, is_cpr=True),
    ProcedureCategory("PERICARDIOCENTESIS_CARDIAC_PACING", "Pericardiocentesis / Cardiac Pacing", 5),
    ProcedureCategory("CPR_SPECIAL_PEDIATRIC_NEONATAL", "CPR - Special / Pediatric / Neonatal", 15, is_cpr=True),
    ProcedureCategory("NASOGASTRIC_TUBE", "Nasogastric Tube Insertion", 30),
    ProcedureCategory("FOLEYS_CATHETERISATION", "Foley's Catheterisation", 30),
    ProcedureCategory("GUIDED_SUPRAPUBIC_CATHETERISATION", "Guided Suprapubic Catheterisation", 5),
    ProcedureCategory("PARACENTESIS", "Paracentesis", 10),
    ProcedureCategory("LUMBAR_PUNCTURE", "Lumbar Puncture", 10),
    ProcedureCategory("INCISION_DRAINAGE", "Incision & Drainage", 10),
    ProcedureCategory("PER_RECTAL_PROCTOSCOPY", "Per Rectal / Proctoscopy", 10),
    ProcedureCategory("PENILE_EMERGENCIES", "Penile Emergencies", 5),
    ProcedureCategory("NASAL_PACKING", "Nasal Packing", 10),
    ProcedureCategory("ENT_DIAGNOSTIC_EXAMINATION", "ENT Diagnostic Examination", 10),
    ProcedureCategory("ENT_FOREIGN_BODY_REMOVAL", "ENT Foreign Body Removal", 10),
    ProcedureCategory("TRACHEOSTOMY_MANAGEMENT", "Tracheostomy Management", 5),
    ProcedureCategory("WOUND_MANAGEMENT_SIMPLE_COMPLEX", "Wound Management - Simple & Complex", 50),
    ProcedureCategory("WOUND_MANAGEMENT_ANIMAL_BITE", "Wound Management - Animal Bite", 15),
    ProcedureCategory("WOUND_MANAGEMENT_BURNS_AMPUTATION", "Wound Management - Burns & Amputation", 15),
    ProcedureCategory("CERVICAL_COLLAR", "Cervical Collar Application", 20),
    ProcedureCategory("SPINAL_IMMOBILIZATION", "Spinal Immobilization", 20),
    ProcedureCategory("PELVIC_STABILIZATION", "Pelvic Stabilization", 10),
    ProcedureCategory("SPLINTING_FRACTURES", "Splinting of Fractures", 30),
    ProcedureCategory("PLASTER_TECHNIQUE", "Plaster Technique", 20),
    ProcedureCategory("REDUCTION_DISLOCATION", "Reduction of Dislocation", 10),
    ProcedureCategory("OTHER_PROCEDURES", "Other Procedures", 20),
    ProcedureCategory("REGIONAL_ANAESTHESIA_NERVE_BLOCK", "Regional Anaesthesia / Nerve Block", 10),
    ProcedureCategory("PROCEDURAL_SEDATION", "Procedural Sedation", 15),
    ProcedureCategory("MAXILLOFACIAL_DENTAL", "Maxillofacial & Dental Procedures", 10),
    ProcedureCategory("EMERGENCY_BURR_HOLE_EVD", "Emergency Burr Hole / EVD", 5),
    ProcedureCategory("PER_VAGINAL_SPECULUM", "Per Vaginal / Speculum Examination", 10),
    ProcedureCategory("VAGINAL_DELIVERY", "Vaginal Delivery", 5),
    ProcedureCategory("SEXUAL_ABUSE_EXAMINATION", "Sexual Abuse Examination", 5),
    ProcedureCategory("OPHTHALMIC_SLIT_LAMP", "Ophthalmic Slit Lamp Examination", 10),
    ProcedureCategory("OPHTHALMIC_FB_REMOVAL", "Ophthalmic Foreign Body Removal", 5),
    ProcedureCategory("ANY_OTHER", "Any Other Procedure", 20),
)


IMAGING_CATEGORIES: tuple[ImagingCategory, ...] = (
    ImagingCategory("ULTRASOUND_ECHO_NON_TRAUMA", "Ultrasound & Echocardiography: Non-Trauma Adult / Pediatric", 60),
    ImagingCategory("POCUS_TRAUMA", "Point of Care Ultrasonography: Trauma Adult / Pediatric", 50),
    ImagingCategory("XRAY_CT_NON_TRAUMA", "X-Ray / CT Analysis: Non-Trauma Adult / Pediatric", 40),
    ImagingCategory("XRAY_CT_MRI_BRAIN", "X-Ray / CT / MRI Brain Analysis: Non-Trauma Adult / Pediatric", 10),
    ImagingCategory("XRAY_CT_TRAUMA", "X-Ray / CT Analysis: Trauma Adult / Pediatric", 50),
)


ROTATION_POSTINGS: tuple[RotationPosting, ...] = (
    # core
    RotationPosting(1, "Emergency Medicine", False),
    RotationPosting(2, "Critical Care", False),
    RotationPosting(3, "Trauma surgery (including Ortho trauma & Neuro Trauma)", False),
    RotationPosting(4, "Neonatal ICU", False),
    RotationPosting(5, "Cardiology", False),
    RotationPosting(6, "Medicine", False),
    RotationPosting(7, "Pediatric Emergency and critical care", False),
    # elective
    RotationPosting(8, "Nephrology", True),
    RotationPosting(9, "Gastroenterology", True),
    RotationPosting(10, "Neurology", True),
    RotationPosting(11, "Anesthesia", True),
    RotationPosting(12, "Pulmonary Medicine & Sleep disorders", True),
    RotationPosting(13, "Hematology Medical Oncology", True),
    RotationPosting(14, "Dermatology", True),
    RotationPosting(15, "Psychiatry", True),
    RotationPosting(16, "Obstetrics & Gynecology", True),
    RotationPosting(17, "Oto-rhino laryngology", True),
    RotationPosting(18, "Ophthalmology", True),
    RotationPosting(19, "Forensic Medicine", True),
    RotationPosting(20, "Community Medicine", True),
)


# Same ten skills are logged for adult and pediatric patients.
CLINICAL_SKILLS: tuple[str, ...] = (
    "Initial Assessment Non-Trauma",
    "Initial Assessment Trauma",
    "Secondary Survey",
    "General Physical + Head to toe Examination",
    "Respiratory System Examination",
    "Cardiovascular System Examination",
    "Central Nervous & Peripheral Nervous System Examination",
    "Per abdominal Examination + Uro/Gynecological Examination",
    "ENT + Ophthalmological Examination",
    "Musculoskeletal + Joint Examination",
)


CASE_CATEGORY_MAP = {c.code: c for c in CASE_CATEGORIES}
PROCEDURE_CATEGORY_MAP = {c.code: c for c in PROCEDURE_CATEGORIES}
IMAGING_CATEGORY_MAP = {c.code: c for c in IMAGING_CATEGORIES}
ROTATION_POSTING_MAP = {r.name: r for r in ROTATION_POSTINGS}


def case_sub_categories(code: str) -> tuple[str, ...]:
    category = CASE_CATEGORY_MAP.get(code)
    return category.sub_categories if category else ()


def skill_levels_for_procedure(code: str) -> frozenset[str]:
    category = PROCEDURE_CATEGORY_MAP.get(code)
    if category is not None and category.is_cpr:
        return CPR_SKILL_LEVELS
    return STANDARD_SKILL_LEVELS


# -------------------------
# Diagnostic skills: 10 per category
# -------------------------
DIAGNOSTIC_SKILLS: dict[str, tuple[str, ...]] = {
    DiagnosticCategory.ABG_ANALYSIS: (
        "Respiratory Acidosis acute/chronic",
        "Respiratory Alkalosis acute/chronic",
        "Metabolic acidosis- HAGMA",
        "Metabolic acidosis- NAGMA",
        "Metabolic Alkalosis",
        "Mixed acid base disorders",
        "Mixed acid base disorders with albumin correction",
        "Interpretation of oxygenation",
        "Co-oximetry/ Methemoglobinemia",
        "Osmolar gap",
    ),
    DiagnosticCategory.ECG_ANALYSIS: (
        "Normal ECG",
        "Brady Arrhythmias",
        "Conduction disorders",
        "Tachyarrhythmia -- Narrow complex",
        "Tachyarrhythmia -- Wide complex",
        "Cardiac arrest rhythm",
        "Acute coronary syndrome",
        "Electrolyte abnormality",
        "ECG in syncope- channelopathies/ other pathology",
        "ECG Toxicology",
    ),
    DiagnosticCategory.OTHER_DIAGNOSTIC: (
        "Hemogram",
        "Peripheral Smear",
        "Biochemical investigation -- Renal/Liver function tests",
        "Point of care biomarkers interpretation",
        "Urine Dipstick analysis, Urine microscopy",
        "Fluid analysis- Pleural/ peritoneal/ CSF analysis",
        "Investigation in Tropical fever/ Other infectious disease/ Sepsis",
        "Investigations in toxicological cases",
        "Other specialized investigation -- Pulmonary function test/ PEFR",
        "Other specialized investigation -- Nerve conduction study/EEG/EMG",
    ),
}


def diagnostic_skills_for(category: str) -> tuple[str, ...]:
    return DIAGNOSTIC_SKILLS.get(category, ())
