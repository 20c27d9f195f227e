# identity_service/core/phone.py
# Разбор и канонизация телефонных номеров через phonenumbers (порт libphonenumber).
# Экземпляр без изменяемого состояния: один на процесс, безопасно делить между потоками.
from functools import lru_cache

import phonenumbers
from phonenumbers import NumberParseException, PhoneNumber, PhoneNumberFormat

from identity_service.core.exceptions import InvalidPhoneNumber


class PhoneValidator:
    """Обёртка над phonenumbers: parse / is_valid / format E.164."""

    def parse(self, national_number: str, country_code: str) -> PhoneNumber:
        """Разбирает номер относительно региона (ISO 3166-1, например "BR")."""
        try:
            return phonenumbers.parse(national_number, country_code.upper())
        except NumberParseException as e:
            raise InvalidPhoneNumber(f"Invalid phone number format: {e}") from e

    def is_valid(self, number: PhoneNumber) -> bool:
        return phonenumbers.is_valid_number(number)

    def format_e164(self, number: PhoneNumber) -> str:
        return phonenumbers.format_number(number, PhoneNumberFormat.E164)

    def canonicalize(self, national_number: str, country_code: str) -> str:
        """
        Номер + регион -> каноничная строка E.164 ("+5511961234567").
        Бросает InvalidPhoneNumber, если номер не разбирается или не валиден для региона.
        """
        number = self.parse(national_number, country_code)
        if not self.is_valid(number):
            raise InvalidPhoneNumber(f"Invalid phone number for the region {country_code}")
        return self.format_e164(number)

    def normalize_e164(self, phone: str) -> str:
        """
        Номер с префиксом +<код страны> (разделители допустимы) -> E.164.
        Валидность для региона не проверяется: это только приведение формы.
        """
        try:
            number = phonenumbers.parse(phone.strip(), None)
        except NumberParseException as e:
            raise InvalidPhoneNumber(f"Invalid phone number format: {e}") from e
        return self.format_e164(number)


@lru_cache(maxsize=1)
def get_phone_validator() -> PhoneValidator:
    """Зависимость: единственный PhoneValidator на процесс."""
    return PhoneValidator()
