from django import forms
from django.utils.translation import gettext_lazy as _
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Submit, Field
from crispy_forms.bootstrap import FormActions


# LOGIN FORM
class LoginForm(forms.Form):
    email = forms.EmailField(
        label=_('Email adres'),
        max_length=255,
        required=True,
        error_messages={
            'required': _('Email is verplicht'),
            'invalid': _('Ongeldig email adres'),
        },
        widget=forms.EmailInput(attrs={
            'class': 'form-control',
            'placeholder': _('naam@auria.nl'),
            'autofocus': True,
        })
    )

    password = forms.CharField(
        label=_('Wachtwoord'),
        required=True,
        error_messages={'required': _('Wachtwoord is verplicht')},
        widget=forms.PasswordInput(attrs={
            'class': 'form-control',
            'placeholder': _('Voer je wachtwoord in'),
        })
    )

    remember = forms.BooleanField(
        label=_('Onthoud mij'),
        required=False,
        initial=False,
        widget=forms.CheckboxInput(attrs={
            'class': 'form-check-input',
        })
    )

    def __init__(self, *args, **kwargs):

        super().__init__(*args, **kwargs)

        self.helper = FormHelper()
        self.helper.form_method = 'post'
        # The template wraps the fields so it can add the next parameter
        self.helper.form_tag = False

        self.helper.layout = Layout(
            Field('email', css_class='mb-3'),
            Field('password', css_class='mb-3'),
            Field('remember', css_class='mb-3'),
            FormActions(
                Submit('submit', _('Inloggen'), css_class='btn btn-primary w-100')
            )
        )

    def clean_email(self):

        email = self.cleaned_data.get('email', '')
        return email.lower().strip()
