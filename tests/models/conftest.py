# tests/models/conftest.py
"""
Shared fixtures for entity tests.
"""

import pytest


@pytest.fixture
def user_args():
    """Constructor arguments for a persisted, active User"""
    return {
        "user_id": 1,
        "email": "dmcdonald21@cnm.edu",
        "password": "a1" * 64,
        "salt": "b2" * 32,
        "authentication_token": None,
    }


@pytest.fixture
def profile_args():
    """Constructor arguments for a new Profile"""
    return {
        "profile_id": None,
        "user_id": 1,
        "name": "Dylan McDonald",
        "address1": "525 Buena Vista Dr SE",
        "address2": None,
        "city": "Albuquerque",
        "state": "NM",
        "zip_code": "87106",
        "phone": "(505) 224-4000",
    }


@pytest.fixture
def order_header_row():
    """A storage row as a database driver would return it"""
    return {
        "order_header_id": "12",
        "profile_id": "3",
        "order_date": "2014-09-22 10:15:00",
        "ship_date": "2014-09-24 08:00:00",
        "unrelated_column": "ignored",
    }
