# users/utils.py
import re
import phonenumbers
from phonenumbers import NumberParseException
from django.conf import settings


def _preclean(raw: str) -> str:
    """
    Strip spaces/punctuation and turn a leading 00 into +
    """
    if not raw:
        return raw
    s = raw.strip()
    s = re.sub(r'[^\d+]', '', s)
    if s.startswith("00"):
        s = "+" + s[2:]
    return s


def to_e164(phone_str, default_region='ET'):
    """
    Convert a phone number to E.164
    e.g. "0911234567" -> "+251911234567"
    """
    if not phone_str:
        raise ValueError("invalid_phone_format")

    try:
        phone_clean = _preclean(phone_str)
        region = getattr(settings, "DEFAULT_REGION", default_region)

        phone_obj = phonenumbers.parse(
            phone_clean,
            None if phone_clean.startswith("+") else region
        )

        if not (phonenumbers.is_possible_number(phone_obj) and
                phonenumbers.is_valid_number(phone_obj)):
            raise ValueError("invalid_phone_format")

        return phonenumbers.format_number(
            phone_obj,
            phonenumbers.PhoneNumberFormat.E164
        )

    except NumberParseException:
        raise ValueError("invalid_phone_format")
