from django import forms


class APIConvertOptions(forms.Form):
    display = forms.BooleanField(required=False)
    dryrun = forms.BooleanField(required=False)


class APIConvertText(forms.Form):
    text = forms.CharField(strip=False)
    display = forms.BooleanField(required=False)
