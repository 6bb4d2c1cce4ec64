"""
Unit tests for clinic.store: key-value store + ClinicProfile（load at init / save on change）。
"""
from unittest.mock import MagicMock, patch

import pytest

from clinic.exceptions import ValidationError
from clinic.store import ClinicProfile, MemoryKeyValueStore, RedisKeyValueStore, get_store


class TestMemoryStore:

    def test_missing_key_returns_default(self):
        assert MemoryKeyValueStore().load('nope', 'fallback') == 'fallback'

    def test_values_are_copies(self):
        store = MemoryKeyValueStore()
        staff = [{'id': '1', 'email': 'a@clinic.in'}]
        store.save('staff', staff)
        staff.append({'id': '2', 'email': 'b@clinic.in'})

        assert store.load('staff') == [{'id': '1', 'email': 'a@clinic.in'}]


class TestGetStore:

    def test_memory_is_shared_within_process(self):
        assert get_store() is get_store()

    def test_redis_backend(self, settings):
        settings.KV_STORE_BACKEND = 'redis'
        settings.REDIS_URL = 'redis://localhost:6379/9'
        with patch('redis.from_url') as mock_from_url:
            store = get_store()

        assert isinstance(store, RedisKeyValueStore)
        mock_from_url.assert_called_once_with('redis://localhost:6379/9')

    def test_unknown_backend(self, settings):
        settings.KV_STORE_BACKEND = 'sqlite'
        with pytest.raises(ValueError):
            get_store()


class TestRedisStore:

    def test_prefixed_json(self):
        client = MagicMock()
        client.get.return_value = b'"Smile Dental"'
        with patch('redis.from_url', return_value=client):
            store = RedisKeyValueStore('redis://localhost:6379/0')

        assert store.load('clinic_name') == 'Smile Dental'
        client.get.assert_called_once_with('clinicease:clinic_name')

        store.save('phone', '0221234')
        client.set.assert_called_once_with('clinicease:phone', '"0221234"')


class TestClinicProfile:

    def test_defaults_loaded_at_init(self):
        profile = ClinicProfile(MemoryKeyValueStore())
        assert profile['clinic_name'] == 'ClinicEase Test Clinic'
        assert profile['staff'] == []

    def test_saved_values_loaded_at_init(self):
        store = MemoryKeyValueStore()
        store.save('clinic_name', 'Smile Dental')
        assert ClinicProfile(store)['clinic_name'] == 'Smile Dental'

    def test_update_saves_only_changed_keys(self):
        store = MagicMock(wraps=MemoryKeyValueStore())
        profile = ClinicProfile(store)

        changed = profile.update({'clinic_name': 'Smile Dental', 'phone': ''})

        assert changed == ['clinic_name']
        store.save.assert_called_once_with('clinic_name', 'Smile Dental')

    def test_update_persists_for_next_instance(self):
        store = MemoryKeyValueStore()
        ClinicProfile(store).update({'staff': [{'id': '1', 'email': 'nurse@clinic.in'}]})

        assert ClinicProfile(store)['staff'] == [{'id': '1', 'email': 'nurse@clinic.in'}]

    @pytest.mark.parametrize('changes, field', [
        ({'favourite_colour': 'blue'}, 'favourite_colour'),
        ({'phone': 123}, 'phone'),
        ({'staff': [{'id': '1'}]}, 'staff'),
        ({'clinic_name': '   '}, 'clinic_name'),
    ])
    def test_invalid_updates_rejected_and_nothing_saved(self, changes, field):
        store = MemoryKeyValueStore()
        profile = ClinicProfile(store)

        with pytest.raises(ValidationError) as exc_info:
            profile.update(changes)

        assert exc_info.value.detail['errors'][0]['field'] == field
        assert ClinicProfile(store).as_dict() == profile.as_dict()

    @pytest.mark.parametrize('changes', [[1], 'clinic_name', None])
    def test_update_requires_mapping(self, changes):
        with pytest.raises(ValidationError) as exc_info:
            ClinicProfile(MemoryKeyValueStore()).update(changes)
        assert exc_info.value.code == 'INVALID_JSON'
