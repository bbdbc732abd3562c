from django import forms

from catalog.forms import BackendErrorsMixin


class LoginForm(BackendErrorsMixin, forms.Form):
    email = forms.EmailField(
        label="Email",
        widget=forms.EmailInput(attrs={"placeholder": "m@example.com", "autocomplete": "email"}),
    )
    password = forms.CharField(
        label="Пароль",
        strip=False,
        widget=forms.PasswordInput(attrs={"autocomplete": "current-password"}),
    )
