"""
Security Module - client IP, login throttling, password hashing and audit logging
"""

import time
import socket
import ipaddress
from flask import request, current_app
from werkzeug.security import generate_password_hash, check_password_hash


# Sliding-window throttle state: {(ip, endpoint): [timestamp, ...]}
RATE_LIMIT_REQUESTS = {}


def log_audit_event(event_type, email=None, details=''):
    """Log high-level auth events for administrative review"""
    current_app.logger.info(
        f"[audit] {event_type} email={email or '-'} ip={get_client_ip()} {details}".rstrip())


def get_client_ip():
    """Originating client address, honouring a proxy's X-Forwarded-For"""
    forwarded = request.environ.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.environ.get('REMOTE_ADDR', 'unknown')


def check_rate_limit(endpoint='login'):
    """
    Record an attempt and report whether the caller is still under the limit.

    Limits come from LOGIN_RATE_LIMIT attempts per LOGIN_RATE_WINDOW seconds,
    counted separately for each endpoint.
    """
    max_requests = current_app.config.get('LOGIN_RATE_LIMIT', 10)
    window = current_app.config.get('LOGIN_RATE_WINDOW', 60)
    bucket = (get_client_ip(), endpoint)
    now = time.time()

    recent = [ts for ts in RATE_LIMIT_REQUESTS.get(bucket, []) if now - ts < window]
    if len(recent) >= max_requests:
        RATE_LIMIT_REQUESTS[bucket] = recent
        current_app.logger.warning(f"Rate limit exceeded for {bucket[0]} on {endpoint}")
        return False

    recent.append(now)
    RATE_LIMIT_REQUESTS[bucket] = recent
    return True


def is_public_host(hostname):
    """True only when every address the host resolves to is globally routable"""
    if not hostname:
        return False
    try:
        infos = socket.getaddrinfo(hostname, None)
    except (socket.gaierror, UnicodeError):
        return False
    addresses = set(info[4][0] for info in infos)
    if not addresses:
        return False
    for address in addresses:
        # Drop an IPv6 zone suffix such as fe80::1%eth0
        ip = ipaddress.ip_address(address.split('%', 1)[0])
        if not ip.is_global:
            return False
    return True


def hash_password(password):
    return generate_password_hash(password)


def verify_password(password, password_hash):
    """False for empty input, otherwise a constant-time hash comparison"""
    if not password or not password_hash:
        return False
    return check_password_hash(password_hash, password)


__all__ = [
    'get_client_ip',
    'check_rate_limit',
    'hash_password',
    'verify_password',
    'is_public_host',
    'log_audit_event',
    'RATE_LIMIT_REQUESTS'
]
