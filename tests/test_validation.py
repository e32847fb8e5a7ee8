"""
Form validation tests
"""

from userauth.schemas.user import ChangeInfoIn, ChangePasswordIn, ImageUrlIn, RegisterIn, validate_input


def errors_by_field(errors):
    return {e.field: e.message for e in errors}


VALID_REGISTER = {
    "username": "harold",
    "email": "harold@example.com",
    "password": "secret",
    "confirmPassword": "secret",
}


class TestRegisterValidation:
    def test_valid_input(self):
        assert validate_input(RegisterIn, VALID_REGISTER) is None

    def test_short_username(self):
        errors = validate_input(RegisterIn, {**VALID_REGISTER, "username": "ab"})
        assert errors_by_field(errors) == {"username": "Length must be greater than 2"}

    def test_username_with_at_sign(self):
        errors = validate_input(RegisterIn, {**VALID_REGISTER, "username": "har@ld"})
        assert errors_by_field(errors) == {"username": "Cannot include an @"}

    def test_invalid_email(self):
        errors = validate_input(RegisterIn, {**VALID_REGISTER, "email": "harold"})
        assert errors_by_field(errors) == {"email": "Invalid email"}

    def test_short_password(self):
        errors = validate_input(RegisterIn, {**VALID_REGISTER, "password": "ab", "confirmPassword": "ab"})
        assert errors_by_field(errors) == {"password": "Length must be at least 3"}

    def test_password_mismatch_uses_camel_case_field(self):
        errors = validate_input(RegisterIn, {**VALID_REGISTER, "confirmPassword": "other"})
        assert errors_by_field(errors) == {"confirmPassword": "Passwords do not match"}

    def test_multiple_errors(self):
        errors = validate_input(RegisterIn, {**VALID_REGISTER, "username": "ab", "email": "nope"})
        assert set(errors_by_field(errors)) == {"username", "email"}


class TestChangeInfoValidation:
    def test_empty_input_is_valid(self):
        assert validate_input(ChangeInfoIn, {}) is None

    def test_only_given_fields_are_checked(self):
        assert validate_input(ChangeInfoIn, {"email": "new@example.com"}) is None
        errors = validate_input(ChangeInfoIn, {"username": "x"})
        assert errors_by_field(errors) == {"username": "Length must be greater than 2"}

    def test_password_needs_confirmation(self):
        errors = validate_input(ChangeInfoIn, {"password": "secret"})
        assert errors_by_field(errors) == {"confirmPassword": "Passwords do not match"}

    def test_matching_password(self):
        assert validate_input(ChangeInfoIn, {"password": "secret", "confirmPassword": "secret"}) is None


class TestChangePasswordValidation:
    def test_short_new_password(self):
        errors = validate_input(ChangePasswordIn, {"newPassword": "ab", "confirmNewPassword": "ab"})
        assert errors_by_field(errors) == {"newPassword": "Length must be at least 3"}

    def test_mismatch(self):
        errors = validate_input(ChangePasswordIn, {"newPassword": "secret", "confirmNewPassword": "other"})
        assert errors_by_field(errors) == {"confirmNewPassword": "Passwords do not match"}


class TestImageUrlValidation:
    def test_valid_url(self):
        assert validate_input(ImageUrlIn, {"imageUrl": "https://cdn.example.com/a.png"}) is None

    def test_invalid_url(self):
        errors = validate_input(ImageUrlIn, {"imageUrl": "not a url"})
        assert errors_by_field(errors) == {"imageUrl": "Invalid URL"}
