# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for KeyMapping and record property access."""

from dataclasses import dataclass

import pytest

from genro_assetgraph import KeyMapping, KeyMappingError, UsageError
from genro_assetgraph.keys import has_own_key, is_record, read_key, resolve_key


class Asset:
    """Plain object record."""

    kind = 'asset'

    def __init__(self, asset_id, **extra):
        self.assetId = asset_id
        self.__dict__.update(extra)


class SlottedAsset:
    __slots__ = ('assetId', 'isTerminal')

    def __init__(self, asset_id):
        self.assetId = asset_id


@dataclass
class DataAsset:
    assetId: str
    isExhausted: bool = False


class TestKeyMapping:
    """Tests for KeyMapping."""

    def test_defaults(self):
        """Test default keys."""
        keys = KeyMapping()
        assert keys.id == 'id'
        assert keys.children == 'children'
        assert keys.extra == {}

    def test_passthrough_keys(self):
        """Test extra keys are kept untouched."""
        keys = KeyMapping(id='assetId', children='subAssets', label='assetName')
        assert keys['label'] == 'assetName'
        assert keys['id'] == 'assetId'
        assert keys.get('icon') is None
        assert keys.get('icon', 'px:icon') == 'px:icon'
        assert keys.as_dict() == {
            'id': 'assetId', 'children': 'subAssets', 'label': 'assetName',
        }
        assert list(keys) == ['id', 'children', 'label']

    def test_getitem_unknown_raises(self):
        """Test unknown key names raise KeyError."""
        with pytest.raises(KeyError):
            KeyMapping()['route']

    def test_empty_key_name_rejected(self):
        """Test empty or non-string id and children names are rejected."""
        with pytest.raises(KeyMappingError, match="non-empty string"):
            KeyMapping(id='')
        with pytest.raises(KeyMappingError, match="'children'"):
            KeyMapping(children=3)

    def test_passthrough_values_kept_as_given(self):
        """Test passthrough keys are not validated."""
        keys = KeyMapping.from_value({'id': 'id', 'children': 'children', 'icon': None})
        assert keys['icon'] is None
        assert keys.extra == {'icon': None}
        keys = KeyMapping(label=3, route='')
        assert keys['label'] == 3
        assert keys['route'] == ''
        assert hash(keys) == hash(KeyMapping(label=3, route=''))

    def test_equality(self):
        """Test mappings compare by content."""
        assert KeyMapping(label='name') == KeyMapping(label='name')
        assert KeyMapping() != KeyMapping(id='key', children='children')
        assert hash(KeyMapping()) == hash(KeyMapping())

    def test_repr(self):
        """Test string representation."""
        assert repr(KeyMapping()) == "KeyMapping(id='id', children='children')"


class TestKeyMappingFromValue:
    """Tests for KeyMapping.from_value."""

    def test_none_gives_defaults(self):
        """Test None gives the default mapping."""
        assert KeyMapping.from_value(None) == KeyMapping()

    def test_empty_mapping_gives_defaults(self):
        """Test an empty mapping customizes nothing."""
        assert KeyMapping.from_value({}) == KeyMapping()

    def test_existing_mapping_returned(self):
        """Test a KeyMapping is returned as is."""
        keys = KeyMapping(id='key', children='items')
        assert KeyMapping.from_value(keys) is keys

    def test_full_override(self):
        """Test a mapping naming all recognized keys."""
        keys = KeyMapping.from_value(
            {'id': 'assetId', 'children': 'subAssets', 'icon': 'glyph'}
        )
        assert keys.id == 'assetId'
        assert keys.children == 'subAssets'
        assert keys['icon'] == 'glyph'

    def test_partial_override_rejected(self):
        """Test customizing id without children is a usage error."""
        with pytest.raises(KeyMappingError, match="missing: children"):
            KeyMapping.from_value({'id': 'assetId'})
        with pytest.raises(UsageError, match="missing: id"):
            KeyMapping.from_value({'children': 'subAssets', 'label': 'name'})

    def test_non_mapping_rejected(self):
        """Test a non-mapping value is rejected."""
        with pytest.raises(KeyMappingError, match="must be a mapping"):
            KeyMapping.from_value(['id', 'children'])

    def test_non_string_key_name_rejected(self):
        """Test non-string key names are a usage error, not a TypeError."""
        with pytest.raises(KeyMappingError, match="must be strings, got 1"):
            KeyMapping.from_value({1: 'x', 'id': 'id', 'children': 'children'})


class TestRecordAccess:
    """Tests for read_key, has_own_key, resolve_key and is_record."""

    def test_read_mapping(self):
        """Test mappings are read by item access."""
        assert read_key({'id': 'a'}, 'id') == 'a'
        assert read_key({'id': 'a'}, 'label') is None
        assert read_key({'id': 'a'}, 'label', 'x') == 'x'

    def test_read_object(self):
        """Test objects are read by attribute access."""
        asset = Asset('a1')
        assert read_key(asset, 'assetId') == 'a1'
        assert read_key(asset, 'missing') is None
        assert read_key(DataAsset('d1'), 'assetId') == 'd1'

    def test_has_own_key_mapping(self):
        """Test own keys of mappings."""
        assert has_own_key({'isTerminal': None}, 'isTerminal') is True
        assert has_own_key({}, 'isTerminal') is False

    def test_has_own_key_object(self):
        """Test instance attributes count, class attributes do not."""
        asset = Asset('a1', isTerminal=True)
        assert has_own_key(asset, 'isTerminal') is True
        assert has_own_key(asset, 'kind') is False
        assert has_own_key(asset, 'isExhausted') is False

    def test_has_own_key_slots(self):
        """Test set slots count, unset slots do not."""
        asset = SlottedAsset('s1')
        assert has_own_key(asset, 'assetId') is True
        assert has_own_key(asset, 'isTerminal') is False
        asset.isTerminal = True
        assert has_own_key(asset, 'isTerminal') is True

    def test_has_own_key_dataclass(self):
        """Test dataclass fields are own keys."""
        assert has_own_key(DataAsset('d1'), 'isExhausted') is True

    def test_resolve_key(self):
        """Test per-call key overrides."""
        assert resolve_key('route', 'id') == 'route'
        assert resolve_key('', 'id') == 'id'
        assert resolve_key(None, 'id') == 'id'
        assert resolve_key(5, 'id') == 'id'

    def test_is_record(self):
        """Test what can be attached as a node."""
        assert is_record({}) is True
        assert is_record(Asset('a')) is True
        assert is_record(None) is False
        assert is_record('home') is False
        assert is_record(b'home') is False
        assert is_record(3) is False
        assert is_record(True) is False
        assert is_record([{}]) is False
        assert is_record(iter([{}])) is False
        assert is_record(r for r in [{}]) is False
