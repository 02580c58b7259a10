import pytest

from identity_core.domain.value_objects.email import Email, mask_email


def test_email_is_normalized():
    assert Email("  John.Doe@Example.COM ").value == "john.doe@example.com"


def test_equality_uses_normalized_value():
    assert Email("A@example.com") == Email("a@example.com")


@pytest.mark.parametrize("value", ["not-an-email", "a@b", "@example.com", "x@mailinator.com"])
def test_invalid_emails_are_rejected(value):
    with pytest.raises(ValueError):
        Email(value)


def test_non_string_is_rejected():
    with pytest.raises(TypeError):
        Email(123)


def test_domain_property():
    assert Email("user@example.com").domain == "example.com"


def test_masking_hides_most_characters():
    masked = Email("user@example.com").mask_for_logging()

    assert masked.startswith("us")
    assert "user" not in masked
    assert masked.endswith("m")


@pytest.mark.parametrize("value", ["", None, "no-at-sign"])
def test_mask_email_handles_garbage(value):
    assert mask_email(value) == "***"
