import json
from datetime import date, datetime
from enum import Enum

from crispy_forms.bootstrap import FormActions
from crispy_forms.helper import FormHelper
from crispy_forms.layout import HTML, Div, Field, Layout, Submit
from django import forms
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.core.schemas import FieldKind, Variant


class FormMode(str, Enum):
    CREATE = 'create'
    EDIT = 'edit'
    VIEW = 'view'


def editable_fields(schema):
    """Descriptors shown in forms: everything except system columns"""
    return [descriptor for descriptor in schema.fields if not descriptor.is_system]


def datetime_local(value):
    """Value for a datetime-local input (local time, second precision)"""
    parsed = value if isinstance(value, datetime) else parse_datetime(str(value))
    if parsed is None:
        return value
    if timezone.is_aware(parsed):
        parsed = timezone.localtime(parsed)
    return parsed.strftime('%Y-%m-%dT%H:%M:%S')


def same_display_value(submitted, shown, descriptor):
    """
    True when the submitted text is what the form was opened with.

    Browsers send textarea newlines as CRLF and drop zero seconds from
    datetime-local inputs, so both are compared loosely.
    """
    if submitted is None:
        return False
    submitted = str(submitted).replace('\r\n', '\n')
    shown = str(shown)
    if submitted == shown:
        return True
    if descriptor.kind in (FieldKind.DATETIME, FieldKind.TIMESTAMP):
        try:
            parsed = parse_datetime(submitted)
            return parsed is not None and parsed == parse_datetime(shown)
        except ValueError:
            return False
    return False


def initial_values(schema, mode, row=None):
    """
    Starting values of a form.

    Create: the descriptor's default, else False for booleans and ""
    for everything else. Edit/view: the row's values, with None shown as
    "" and JSON values pretty-printed.
    """
    values = {}
    for descriptor in editable_fields(schema):
        if mode is FormMode.CREATE or row is None:
            if descriptor.default is not None:
                values[descriptor.name] = descriptor.default
            elif descriptor.variant is Variant.BOOLEAN:
                values[descriptor.name] = False
            else:
                values[descriptor.name] = ''
            continue

        value = row.get(descriptor.name)
        if value is None:
            value = ''
        elif isinstance(value, (dict, list)):
            value = json.dumps(value, indent=2, ensure_ascii=False)
        elif descriptor.kind in (FieldKind.DATETIME, FieldKind.TIMESTAMP):
            value = datetime_local(value)
        values[descriptor.name] = value
    return values


def parse_json_leniently(value):
    """JSON text becomes data; malformed JSON is kept as the raw string"""
    if value in (None, ''):
        return None
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return value


# WIDGETS (one builder per value variant)

def _empty_choice(descriptor):
    return [('', f'Selecteer {descriptor.label}')]


def _text_widget(descriptor, options):
    if descriptor.kind is FieldKind.TEXTAREA:
        rows = 8 if descriptor.name == 'script' else 4
        return forms.Textarea(attrs={'class': 'form-control', 'rows': rows})
    if descriptor.kind is FieldKind.EMAIL:
        return forms.EmailInput(attrs={'class': 'form-control', 'dir': 'ltr'})
    return forms.TextInput(attrs={'class': 'form-control'})


def _number_widget(descriptor, options):
    return forms.NumberInput(attrs={'class': 'form-control', 'step': 'any'})


def _boolean_widget(descriptor, options):
    return forms.CheckboxInput(attrs={'class': 'form-check-input'})


def _enum_widget(descriptor, options):
    choices = _empty_choice(descriptor) + [(option.value, option.label) for option in descriptor.options]
    return forms.Select(choices=choices, attrs={'class': 'form-select'})


def _relation_widget(descriptor, options):
    choices = _empty_choice(descriptor) + [(option.value, option.label) for option in options]
    return forms.Select(choices=choices, attrs={'class': 'form-select'})


def _date_widget(descriptor, options):
    if descriptor.kind is FieldKind.DATE:
        return forms.DateInput(attrs={'class': 'form-control', 'type': 'date'})
    return forms.DateTimeInput(attrs={'class': 'form-control', 'type': 'datetime-local', 'step': '1'})


def _json_widget(descriptor, options):
    return forms.Textarea(attrs={
        'class': 'form-control font-monospace',
        'rows': 8,
        'placeholder': '{"key": "value"}',
    })


WIDGET_BUILDERS = {
    Variant.TEXT: _text_widget,
    Variant.NUMBER: _number_widget,
    Variant.BOOLEAN: _boolean_widget,
    Variant.ENUM: _enum_widget,
    Variant.RELATION: _relation_widget,
    Variant.DATE: _date_widget,
    Variant.JSON: _json_widget,
}


class SchemaForm(forms.Form):
    """
    Form generated from a TableSchema.

    The display fields are lenient: they only render widgets. Validation
    is delegated to the schema's contract, whose per-field errors are
    attached to this form and whose cleaned values become cleaned_data.
    """

    use_required_attribute = False

    def __init__(self, schema, mode=FormMode.CREATE, related_options=None, data=None, row=None, **kwargs):
        self.schema = schema
        self.mode = FormMode(mode)
        self.row = row
        self.related_options = related_options or {}

        initial = initial_values(schema, self.mode, row)
        super().__init__(data=data, initial=initial, **kwargs)

        for descriptor in editable_fields(schema):
            self.fields[descriptor.name] = self._build_field(descriptor)

        self.helper = self._build_helper()

    def _build_field(self, descriptor):
        widget = WIDGET_BUILDERS[descriptor.variant](descriptor, self.related_options.get(descriptor.name, []))
        label = f'{descriptor.label} *' if descriptor.required else descriptor.label

        if descriptor.variant is Variant.BOOLEAN:
            field = forms.BooleanField(label=label, required=False, widget=widget)
        else:
            field = forms.CharField(label=label, required=False, strip=False, widget=widget)

        if self.mode is FormMode.VIEW:
            field.disabled = True
        return field

    def _build_helper(self):
        helper = FormHelper()
        helper.form_method = 'post'
        fields = [Field(name, css_class='mb-3') for name in self.fields]

        if self.mode is FormMode.VIEW:
            helper.form_tag = False
            helper.layout = Layout(*fields)
            return helper

        submit_label = 'Bijwerken' if self.mode is FormMode.EDIT else 'Toevoegen'
        helper.layout = Layout(
            Div(*fields),
            FormActions(
                Submit('submit', submit_label, css_class='btn btn-primary'),
                HTML('<a href="{{ cancel_url }}" class="btn btn-outline-secondary ms-2">Annuleren</a>'),
            )
        )
        return helper

    def full_clean(self):
        super().full_clean()
        if not self.is_bound or self.mode is FormMode.VIEW:
            return

        contract = self.schema.contract(data=self.data)
        if not contract.is_valid():
            for name, errors in contract.errors.as_data().items():
                self.add_error(name if name in self.fields else None, errors)
            return

        self.cleaned_data = self._normalize(contract.cleaned_data)

    def _kept_from_row(self, descriptor):
        """
        Datetimes are shown in local time and JSON is re-serialised, so
        an untouched field of either kind returns the row's own value.
        """
        if self.mode is not FormMode.EDIT or self.row is None or descriptor.name not in self.row:
            return False
        if descriptor.variant is not Variant.JSON and descriptor.kind not in (FieldKind.DATETIME, FieldKind.TIMESTAMP):
            return False
        return same_display_value(self.data.get(descriptor.name), self.initial.get(descriptor.name), descriptor)

    def _normalize(self, values):
        cleaned = {}
        for name, value in values.items():
            descriptor = self.schema.get_field(name)
            if descriptor is not None and self._kept_from_row(descriptor):
                value = self.row[name]
            elif descriptor is not None and descriptor.variant is Variant.JSON:
                value = parse_json_leniently(value)
            elif isinstance(value, (date, datetime)):
                value = value.isoformat()
            cleaned[name] = value
        return cleaned


class FilterForm(forms.Form):
    """
    Search box, sort controls and one control per filterable field.

    Invalid filter values are ignored rather than reported.
    """

    q = forms.CharField(
        label='Zoeken',
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Zoeken...'}),
    )
    sort = forms.ChoiceField(label='Sorteer op', required=False, widget=forms.Select(attrs={'class': 'form-select'}))
    richting = forms.ChoiceField(
        label='Richting',
        required=False,
        choices=[('desc', 'Aflopend'), ('asc', 'Oplopend')],
        widget=forms.Select(attrs={'class': 'form-select'}),
    )

    def __init__(self, schema, related_options=None, data=None, **kwargs):
        self.schema = schema
        related_options = related_options or {}
        super().__init__(data=data, **kwargs)

        self.fields['sort'].choices = [('', 'Standaard')] + [
            (descriptor.name, descriptor.label) for descriptor in schema.fields
        ]

        self.filter_names = []
        for descriptor in schema.fields:
            if not descriptor.filterable or descriptor.name in self.fields:
                continue
            self.fields[descriptor.name] = self._build_filter(descriptor, related_options.get(descriptor.name, []))
            self.filter_names.append(descriptor.name)

    def _build_filter(self, descriptor, options):
        select = forms.Select(attrs={'class': 'form-select'})
        empty = [('', f'Alle {descriptor.label}')]

        if descriptor.variant is Variant.RELATION:
            choices = empty + [(str(option.value), option.label) for option in options]
            return forms.ChoiceField(label=descriptor.label, required=False, choices=choices, widget=select)
        if descriptor.variant is Variant.ENUM:
            choices = empty + [(option.value, option.label) for option in descriptor.options]
            return forms.ChoiceField(label=descriptor.label, required=False, choices=choices, widget=select)
        if descriptor.variant is Variant.BOOLEAN:
            choices = empty + [('true', 'Ja'), ('false', 'Nee')]
            return forms.ChoiceField(label=descriptor.label, required=False, choices=choices, widget=select)
        return forms.CharField(
            label=descriptor.label,
            required=False,
            widget=forms.TextInput(attrs={'class': 'form-control'}),
        )

    def query(self):
        """
        Returns:
            (filters, search, sort) where sort is (column, descending) or None
        """
        if not self.is_bound:
            return {}, None, None

        self.is_valid()
        data = self.cleaned_data

        filters = {name: data[name] for name in self.filter_names if data.get(name)}
        search = data.get('q') or None
        sort = None
        if data.get('sort'):
            sort = (data['sort'], data.get('richting') != 'asc')
        return filters, search, sort
