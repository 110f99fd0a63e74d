# Static option lists shared by the schema registry (rendering)
# and the validation contracts (allowed values).

CAMPAGNE_STATUS_CHOICES = [
    ('actief', 'Actief'),
    ('inactief', 'Inactief'),
    ('voltooid', 'Voltooid'),
]

KLANT_STATUS_CHOICES = [
    ('actief', 'Actief'),
    ('inactief', 'Inactief'),
    ('prospect', 'Prospect'),
]

GESPREK_STATUS_CHOICES = [
    ('gepland', 'Gepland'),
    ('voltooid', 'Voltooid'),
    ('geannuleerd', 'Geannuleerd'),
]

ADMIN_ROLE_CHOICES = [
    ('admin', 'Administrator'),
    ('manager', 'Manager'),
    ('user', 'Gebruiker'),
]
