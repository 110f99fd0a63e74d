"""
Validation contracts for every registered table.

Each contract is a plain Django form: it parses the raw submitted value map
and either returns normalized values (cleaned_data) or per-field error
messages. Messages are in Dutch, the language of the admin users.

Optional text/choice values normalize to None so an unchanged edit
submits exactly the values that were fetched.
"""

from django import forms

from .choices import (
    ADMIN_ROLE_CHOICES,
    CAMPAGNE_STATUS_CHOICES,
    GESPREK_STATUS_CHOICES,
    KLANT_STATUS_CHOICES,
)


def required_text(label):
    return forms.CharField(error_messages={'required': f'{label} is verplicht'})


def optional_text():
    return forms.CharField(required=False, empty_value=None)


def required_email():
    return forms.EmailField(error_messages={
        'required': 'Email is verplicht',
        'invalid': 'Ongeldig email adres',
    })


def optional_choice(choices):
    return forms.TypedChoiceField(
        choices=[('', '')] + list(choices),
        required=False,
        empty_value=None,
        error_messages={'invalid_choice': 'Ongeldige keuze'},
    )


def required_reference(label):
    messages = {
        'required': f'{label} is verplicht',
        'invalid': f'{label} is verplicht',
        'min_value': f'{label} is verplicht',
    }
    return forms.IntegerField(min_value=1, error_messages=messages)


def optional_reference():
    return forms.IntegerField(required=False, error_messages={'invalid': 'Ongeldige selectie'})


def flag():
    return forms.BooleanField(required=False)


class RegioContract(forms.Form):
    naam = required_text('Naam')
    code = required_text('Code')
    beschrijving = optional_text()
    actief = flag()


class CampagneContract(forms.Form):
    naam = required_text('Naam')
    beschrijving = optional_text()
    start_datum = forms.DateField(required=False, error_messages={'invalid': 'Ongeldige datum'})
    eind_datum = forms.DateField(required=False, error_messages={'invalid': 'Ongeldige datum'})
    status = optional_choice(CAMPAGNE_STATUS_CHOICES)


class KlantContract(forms.Form):
    naam = required_text('Naam')
    email = required_email()
    telefoon = optional_text()
    adres = optional_text()
    regio_id = optional_reference()
    status = optional_choice(KLANT_STATUS_CHOICES)


class VerkoperContract(forms.Form):
    naam = required_text('Naam')
    email = required_email()
    telefoon = optional_text()
    regio_id = optional_reference()
    commissie_percentage = forms.FloatField(
        required=False,
        error_messages={'invalid': 'Commissie moet een getal zijn'},
    )
    actief = flag()


class GesprekContract(forms.Form):
    klant_id = required_reference('Klant')
    verkoper_id = required_reference('Verkoper')
    campagne_id = optional_reference()
    regio_id = optional_reference()
    datum = forms.DateField(error_messages={
        'required': 'Datum is verplicht',
        'invalid': 'Ongeldige datum',
    })
    notities = optional_text()
    status = optional_choice(GESPREK_STATUS_CHOICES)


class BelschemaContract(forms.Form):
    naam = required_text('Naam')
    beschrijving = optional_text()
    actief = flag()


class CallScriptContract(forms.Form):
    naam = required_text('Naam')
    script = required_text('Script')
    actief = flag()


class AdminUserContract(forms.Form):
    email = required_email()
    naam = required_text('Naam')
    rol = forms.ChoiceField(choices=ADMIN_ROLE_CHOICES, error_messages={
        'required': 'Rol is verplicht',
        'invalid_choice': 'Ongeldige rol',
    })
    actief = flag()


class LogContract(forms.Form):
    type = required_text('Type')
    status = required_text('Status')
    message = required_text('Message')
    # Free text; parsed as JSON afterwards when possible
    data = optional_text()
    user_id = optional_text()
    ip = optional_text()
    device = optional_text()
    region = optional_text()
    twilio_sid = optional_text()


class InstellingContract(forms.Form):
    key = required_text('Key')
    value = required_text('Value')
    beschrijving = optional_text()


class RapportContract(forms.Form):
    naam = required_text('Naam')
    gegenereerd_op = forms.DateTimeField(error_messages={
        'required': 'Gegenereerd op is verplicht',
        'invalid': 'Ongeldige datum/tijd',
    })
    bestand_url = optional_text()
