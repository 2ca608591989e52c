"""
Tests for contact form validation rules.
"""

import pytest

from domain.validation import RULES, normalize_fields, run_rules, validate_submission


def valid_payload(**overrides):
    payload = {
        'name': 'Jane Doe',
        'email': 'jane@example.com',
        'message': 'Hello, I would like more info.',
    }
    payload.update(overrides)
    return payload


def fields_with_errors(errors):
    return {field for field, _, message in RULES if message in errors}


class TestValidSubmissions:
    """Payloads that pass every rule."""

    def test_valid_submission_is_normalized(self):
        """Values are trimmed and the email is lower-cased."""
        outcome = validate_submission({
            'name': '  Jane Doe ',
            'email': '  JANE@Example.com ',
            'message': '\n Hello, I would like more info. \n',
        })

        assert outcome.is_valid is True
        assert outcome.errors == []
        assert outcome.submission.name == 'Jane Doe'
        assert outcome.submission.email == 'jane@example.com'
        assert outcome.submission.message == 'Hello, I would like more info.'

    @pytest.mark.parametrize('name', [
        'Jo',
        'José Müller',
        'Zoë Ærøskøbing',
        'Łukasz Żółć',
        'a' * 100,
    ])
    def test_accepted_names(self, name):
        outcome = validate_submission(valid_payload(name=name))
        assert outcome.is_valid, outcome.errors

    @pytest.mark.parametrize('email', [
        'jane.doe+news@mail.example.co.uk',
        'first_last%tag@example.org',
        'a@b.io',
    ])
    def test_accepted_emails(self, email):
        outcome = validate_submission(valid_payload(email=email))
        assert outcome.is_valid, outcome.errors

    def test_message_keeps_inner_whitespace(self):
        message = 'Line one\n\nLine   two <b>bold</b> & more'
        outcome = validate_submission(valid_payload(message=message))

        assert outcome.submission.message == message

    def test_message_at_length_limits(self):
        assert validate_submission(valid_payload(message='a' * 10)).is_valid
        assert validate_submission(valid_payload(message='a' * 2000)).is_valid


class TestNameRules:
    """Name field failures."""

    @pytest.mark.parametrize('name', ['J', ' J ', 'J0hn', 'Jane Doe 2nd', 'a' * 101, 'Robert); DROP'])
    def test_invalid_names_mention_name(self, name):
        outcome = validate_submission(valid_payload(name=name))

        assert outcome.is_valid is False
        assert outcome.submission is None
        assert fields_with_errors(outcome.errors) == {'name'}
        assert all('name' in error.lower() for error in outcome.errors)

    def test_too_short(self):
        outcome = validate_submission(valid_payload(name='J'))
        assert outcome.errors == ['Name must be at least 2 characters long']

    def test_too_long(self):
        outcome = validate_submission(valid_payload(name='a' * 101))
        assert outcome.errors == ['Name cannot exceed 100 characters']

    def test_short_name_with_digit_reports_both_rules(self):
        """Rules are not short-circuited."""
        outcome = validate_submission(valid_payload(name='1'))
        assert outcome.errors == [
            'Name must be at least 2 characters long',
            'Name can only contain letters and spaces',
        ]


class TestEmailRules:
    """Email field failures."""

    def test_malformed_email(self):
        outcome = validate_submission(valid_payload(email='bad'))

        assert outcome.errors == [
            'Please provide a valid email address',
            'Please provide a valid email format',
        ]

    def test_email_without_tld(self):
        outcome = validate_submission(valid_payload(email='jane@localhost'))

        assert 'Please provide a valid email format' in outcome.errors

    def test_email_too_long(self):
        email = 'a' * 250 + '@example.com'
        outcome = validate_submission(valid_payload(email=email))

        assert 'Email cannot exceed 254 characters' in outcome.errors
        assert fields_with_errors(outcome.errors) == {'email'}

    def test_test_domain_is_accepted(self):
        """Reserved .test domains match local@domain.tld and are accepted."""
        outcome = validate_submission(valid_payload(email='jane@mail.test'))

        assert outcome.is_valid, outcome.errors

    def test_other_special_use_domains_are_rejected(self):
        """Non-routable special-use domains fail the address check only."""
        outcome = validate_submission(valid_payload(email='jane@host.local'))

        assert outcome.errors == ['Please provide a valid email address']


class TestMessageRules:
    """Message field failures."""

    def test_too_short_after_trim(self):
        outcome = validate_submission(valid_payload(message='   short    '))
        assert outcome.errors == ['Message must be at least 10 characters long']

    def test_no_letters(self):
        outcome = validate_submission(valid_payload(message='1234567890 !?'))
        assert outcome.errors == ['Message must contain at least one letter']

    def test_too_long(self):
        outcome = validate_submission(valid_payload(message='a' * 2001))
        assert outcome.errors == ['Message cannot exceed 2000 characters']


class TestMalformedInput:
    """The validator never raises, whatever it is given."""

    @pytest.mark.parametrize('raw', [None, [], 'name=Jane', 42, True])
    def test_non_object_payload(self, raw):
        outcome = validate_submission(raw)

        assert outcome.is_valid is False
        assert outcome.errors == [
            'Name is required',
            'Email is required',
            'Message is required',
        ]

    def test_missing_field_only_reports_required(self):
        payload = valid_payload()
        del payload['email']

        outcome = validate_submission(payload)

        assert outcome.errors == ['Email is required']

    def test_blank_name_reports_every_string_rule(self):
        """A blank string is still a string, so length and pattern rules run."""
        outcome = validate_submission(valid_payload(name='   '))
        assert outcome.errors == [
            'Name is required',
            'Name must be at least 2 characters long',
            'Name can only contain letters and spaces',
        ]

    def test_blank_email_reports_every_string_rule(self):
        outcome = validate_submission(valid_payload(email=''))
        assert outcome.errors == [
            'Email is required',
            'Please provide a valid email address',
            'Please provide a valid email format',
        ]

    def test_blank_message_reports_every_string_rule(self):
        outcome = validate_submission(valid_payload(message=' \n '))
        assert outcome.errors == [
            'Message is required',
            'Message must be at least 10 characters long',
            'Message must contain at least one letter',
        ]

    @pytest.mark.parametrize('value', [42, ['Jane'], {'first': 'Jane'}, False])
    def test_non_string_field(self, value):
        outcome = validate_submission(valid_payload(name=value))
        assert outcome.errors == ['Name must be a string']

    def test_errors_follow_field_order(self):
        outcome = validate_submission({'message': 42, 'email': 'bad', 'name': 'J'})

        assert outcome.errors == [
            'Name must be at least 2 characters long',
            'Please provide a valid email address',
            'Please provide a valid email format',
            'Message must be a string',
        ]

    def test_extra_fields_are_ignored(self):
        outcome = validate_submission(valid_payload(website='http://spam.example', admin=True))

        assert outcome.is_valid
        assert not hasattr(outcome.submission, 'website')


class TestRuleRunner:
    """Helpers behind validate_submission."""

    def test_normalize_fields(self):
        values = normalize_fields({'name': ' Jane ', 'email': ' A@B.CO ', 'message': 7})

        assert values == {'name': 'Jane', 'email': 'a@b.co', 'message': 7}

    def test_run_rules_collects_every_failure(self):
        rules = [
            ('x', lambda value: False, 'first'),
            ('x', lambda value: False, 'second'),
            ('y', lambda value: True, 'never'),
        ]

        assert run_rules({'x': 'anything', 'y': 'anything'}, rules) == ['first', 'second']


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
