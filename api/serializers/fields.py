import bleach
from rest_framework import serializers


def clean_text(v):
    """Strip any markup from user supplied free text."""
    return bleach.clean((v or '').strip(), tags=set(), strip=True)


class CleanCharField(serializers.CharField):
    def to_internal_value(self, data):
        value = clean_text(super().to_internal_value(data))
        # markup-only input is blank once stripped
        if not value and not self.allow_blank:
            self.fail('blank')
        return value
