from clinic_records.core.domain.schema.entity_schema import EntitySchema, FieldSpec, FieldType

DUNNING_LETTERS = "DunningLetters"
PRESCRIPTION = "Prescription"
TREATMENT = "Treatment"


# ╭──────────────────────────────────────────────╮
# │ 1. Dunning letters                           │
# ╰──────────────────────────────────────────────╯
DUNNING_LETTERS_SCHEMA = EntitySchema.with_audit_fields(
    DUNNING_LETTERS,
    (
        FieldSpec("name",             FieldType.STRING,   searchable=True),
        FieldSpec("reference_number", FieldType.STRING,   searchable=True),
        FieldSpec("recipient_name",   FieldType.STRING,   searchable=True),
        FieldSpec("amount_due",       FieldType.DECIMAL),
        FieldSpec("due_date",         FieldType.DATE),
        FieldSpec("dunning_level",    FieldType.INTEGER),
        FieldSpec("status",           FieldType.STRING),
        FieldSpec("sent_on",          FieldType.DATETIME),
        FieldSpec("notes",            FieldType.STRING,   searchable=True, sortable=False),
    ),
)

# ╭──────────────────────────────────────────────╮
# │ 2. Prescriptions                             │
# ╰──────────────────────────────────────────────╯
PRESCRIPTION_SCHEMA = EntitySchema.with_audit_fields(
    PRESCRIPTION,
    (
        FieldSpec("name",          FieldType.STRING,  searchable=True),
        FieldSpec("patient_name",  FieldType.STRING,  searchable=True),
        FieldSpec("dosage",        FieldType.STRING),
        FieldSpec("frequency",     FieldType.STRING),
        FieldSpec("prescribed_on", FieldType.DATE),
        FieldSpec("valid_until",   FieldType.DATE),
        FieldSpec("refills",       FieldType.INTEGER),
        FieldSpec("prescriber",    FieldType.STRING,  searchable=True),
        FieldSpec("is_active",     FieldType.BOOLEAN),
        FieldSpec("instructions",  FieldType.STRING,  searchable=True, sortable=False),
    ),
)

# ╭──────────────────────────────────────────────╮
# │ 3. Treatments                                │
# ╰──────────────────────────────────────────────╯
TREATMENT_SCHEMA = EntitySchema.with_audit_fields(
    TREATMENT,
    (
        FieldSpec("name",         FieldType.STRING,  searchable=True),
        FieldSpec("patient_name", FieldType.STRING,  searchable=True),
        FieldSpec("tooth",        FieldType.STRING),
        FieldSpec("status",       FieldType.STRING),
        FieldSpec("start_date",   FieldType.DATE),
        FieldSpec("end_date",     FieldType.DATE),
        FieldSpec("sessions",     FieldType.INTEGER),
        FieldSpec("cost",         FieldType.DECIMAL),
        FieldSpec("notes",        FieldType.STRING,  searchable=True, sortable=False),
    ),
)
