"""Admin forms for catalog management."""

from decimal import Decimal

from django import forms

from .models import Product


class ProductForm(forms.ModelForm):
    """Create or edit a product; ``image`` is optional and replaces the current one."""

    price = forms.DecimalField(min_value=Decimal("0"), max_digits=10, decimal_places=2)
    image = forms.FileField(required=False)

    class Meta:
        model = Product
        fields = ["name", "description", "price", "category"]

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("Name is required.")
        return name

    def clean_category(self):
        return self.cleaned_data.get("category", "").strip()
