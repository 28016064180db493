"""
Tests for parsing, formatting and URL helpers.
"""
import socket
from datetime import date

import pytest

from utils.dates import calculate_duration, format_date
from utils.helpers import (filter_image_urls, initials, is_http_url, is_safe_redirect, is_valid_email,
                           missing_fields, normalize_email, parse_date, string_list)
from utils.security import is_public_host
from utils.storage import key_from_url


@pytest.mark.parametrize('value, expected', [
    ('2024-02-29', date(2024, 2, 29)),
    ('2024-02-29T10:30:00Z', date(2024, 2, 29)),
    ('2024-02-29T10:30:00.123Z', date(2024, 2, 29)),
    (date(2020, 1, 1), date(2020, 1, 1)),
    ('', None),
    (None, None),
])
def test_parse_date(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize('value', ['02/29/2024', 'tomorrow', 20240229])
def test_parse_date_rejects_garbage(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_calculate_duration():
    assert calculate_duration('2020-01-01', '2021-03-01') == '1 yr, 2 mos'
    assert calculate_duration('2020-01-01', '2022-01-15') == '2 yrs'
    assert calculate_duration('2020-01-01', '2020-02-01') == '1 mo'
    assert calculate_duration('2020-01-01', '2020-01-20') == '< 1 mo'
    assert calculate_duration(None) == ''


def test_calculate_duration_runs_to_today():
    assert calculate_duration(date(2023, 1, 1), None, today=date(2024, 7, 1)) == '1 yr, 6 mos'


def test_format_date():
    assert format_date(date(2024, 1, 5)) == 'Jan 5, 2024'
    assert format_date('2023-11-30') == 'Nov 30, 2023'
    assert format_date(None) == ''


def test_filter_image_urls():
    urls = ['https://a/1.png', 'bucket.s3.amazonaws.com/k', '/uploads/old.png', '/static/x.png', 42]
    assert filter_image_urls(urls) == urls[:3]
    assert filter_image_urls(urls, limit=1) == ['https://a/1.png']
    assert filter_image_urls('https://a/1.png') == []


def test_missing_fields():
    assert missing_fields({'a': 'x', 'b': ' ', 'c': 0}, ('a', 'b', 'c', 'd')) == ['b', 'd']


def test_string_list():
    assert string_list(['a', ' b ', '', None, 3]) == ['a', 'b', '3']
    assert string_list(None) == []


def test_initials():
    assert initials('ada king lovelace') == 'AK'
    assert initials('') == ''


@pytest.mark.parametrize('target, safe', [
    ('/blog', True),
    ('/', True),
    ('//evil.example.com', False),
    ('https://evil.example.com/', False),
    ('javascript:alert(1)', False),
    ('', False),
])
def test_is_safe_redirect(target, safe):
    assert is_safe_redirect(target) is safe


def test_key_from_url():
    assert key_from_url('https://b.s3.us-east-1.amazonaws.com/projects/1-a.png') == 'projects/1-a.png'
    assert key_from_url('/uploads/a.png') is None


@pytest.mark.parametrize('value, ok', [
    ('https://github.com/ada', True),
    ('http://example.com', True),
    ('javascript:alert(1)', False),
    ('JaVaScRiPt:alert(1)', False),
    ('data:text/html,<script>alert(1)</script>', False),
    ('//evil.example.com', False),
    ('https://', False),
    (['https://github.com'], False),
])
def test_is_http_url(value, ok):
    assert is_http_url(value) is ok


def test_normalize_email():
    assert normalize_email('  Ada@Example.COM ') == 'ada@example.com'
    assert normalize_email(['ada@example.com']) == ''
    assert normalize_email(None) == ''


def test_is_valid_email():
    assert is_valid_email('ada@example.com')
    assert not is_valid_email('not-an-email')
    assert not is_valid_email('')


def _resolves_to(monkeypatch, *addresses):
    infos = [(socket.AF_INET, socket.SOCK_STREAM, 6, '', (address, 0)) for address in addresses]
    monkeypatch.setattr('utils.security.socket.getaddrinfo', lambda host, port: infos)


def test_is_public_host(monkeypatch):
    _resolves_to(monkeypatch, '93.184.216.34')
    assert is_public_host('cdn.example.com') is True


@pytest.mark.parametrize('address', ['127.0.0.1', '169.254.169.254', '10.1.2.3', '192.168.0.1', '::1', 'fe80::1%eth0'])
def test_is_public_host_rejects_internal_addresses(monkeypatch, address):
    _resolves_to(monkeypatch, address)
    assert is_public_host('internal.example.com') is False


def test_is_public_host_rejects_mixed_answers(monkeypatch):
    _resolves_to(monkeypatch, '93.184.216.34', '127.0.0.1')
    assert is_public_host('rebind.example.com') is False


def test_is_public_host_unresolvable(monkeypatch):
    def fail(host, port):
        raise socket.gaierror('Name or service not known')

    monkeypatch.setattr('utils.security.socket.getaddrinfo', fail)
    assert is_public_host('nowhere.invalid') is False
    assert is_public_host('') is False
