# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the DataStore accessor API."""

import pytest

from genro_dataio import (
    DataIOConfig,
    DataNode,
    DataStore,
    MalformedPathError,
    NodeKind,
    NodeNotFoundError,
    PaddingLimitError,
    TypeConflictError,
    create_empty_data,
    load_string_data,
)


@pytest.fixture
def store():
    return DataStore({
        'robot': {
            'name': 'arm',
            'gain': 2.5,
            'enabled': True,
            'payload': None,
            'joints': [
                {'name': 'shoulder', 'limit': 90},
                {'name': 'elbow', 'limit': 120},
            ],
        },
    })


class TestDataStoreCreate:
    """Tests for DataStore construction."""

    def test_empty_store_is_object(self):
        """Test a new store has an empty object root."""
        store = DataStore()
        assert store.kind is NodeKind.OBJECT
        assert len(store) == 0
        assert create_empty_data() == store

    def test_source_from_dict(self):
        """Test plain data sources."""
        store = DataStore({'a': 1, 'b': [True]})
        assert store.get_numeric_value(0, 'a') == 1.0
        assert store.get_boolean_value(False, 'b.0') is True

    def test_source_is_copied(self):
        """Test DataStore and DataNode sources are deep-copied."""
        node = DataNode.from_python({'a': 1})
        store = DataStore(node)
        store.set_numeric_value('a', 2)
        assert node.child('a').value == 1.0

        copy = DataStore(store)
        copy.set_numeric_value('a', 3)
        assert store.get_numeric_value(0, 'a') == 2.0

    def test_source_invalid_type_raises(self):
        """Test unsupported sources raise TypeError."""
        with pytest.raises(TypeError):
            DataStore(object())

    def test_repr(self):
        """Test string representation."""
        assert 'robot' in repr(DataStore({'robot': {}}))


class TestTypedReads:
    """Tests for the typed getters."""

    def test_get_numeric_value(self, store):
        """Test numeric reads by key and index."""
        assert store.get_numeric_value(0.0, 'robot.gain') == 2.5
        assert store.get_numeric_value(0.0, 'robot.joints.%d.limit', 1) == 120.0

    def test_get_string_value(self, store):
        """Test string reads."""
        assert store.get_string_value('', 'robot.name') == 'arm'
        assert store.get_string_value('', 'robot.joints.%d.%s', 0, 'name') == 'shoulder'

    def test_get_boolean_value(self, store):
        """Test boolean reads."""
        assert store.get_boolean_value(False, 'robot.enabled') is True

    @pytest.mark.parametrize('path', [
        'robot.missing',
        'robot.joints.7.limit',
        'robot.name.first',
        'nothing.at.all',
    ])
    def test_default_on_missing(self, store, path):
        """Test every getter falls back to its default for absent paths."""
        assert store.get_numeric_value(-1.0, path) == -1.0
        assert store.get_string_value('none', path) == 'none'
        assert store.get_boolean_value(True, path) is True

    def test_default_on_kind_mismatch(self, store):
        """Test a node of another kind gives the default."""
        assert store.get_numeric_value(-1.0, 'robot.name') == -1.0
        assert store.get_string_value('none', 'robot.gain') == 'none'
        assert store.get_boolean_value(False, 'robot.gain') is False
        assert store.get_numeric_value(-1.0, 'robot.joints') == -1.0

    def test_falsy_values_are_not_defaults(self):
        """Test 0, '' and false are returned as found."""
        store = DataStore({'zero': 0, 'empty': '', 'off': False})
        assert store.get_numeric_value(9.0, 'zero') == 0.0
        assert store.get_string_value('x', 'empty') == ''
        assert store.get_boolean_value(True, 'off') is False

    def test_reads_do_not_create(self, store):
        """Test getters never modify the tree."""
        before = store.copy()
        store.get_numeric_value(0.0, 'a.b.%d', 3)
        store.get_sub_data('x.y')
        store.get_list_size('robot.list')
        store.has_key('robot.joints.5')
        assert store == before

    def test_malformed_path_raises(self, store):
        """Test bad path formats are reported, not defaulted."""
        with pytest.raises(MalformedPathError):
            store.get_numeric_value(0.0, 'robot.joints.%d', -1)
        with pytest.raises(MalformedPathError):
            store.get_string_value('', 'robot.%s')

    def test_key_sequence_path(self, store):
        """Test a tuple of keys addresses like a format."""
        assert store.get_numeric_value(0.0, ('robot', 'joints', 0, 'limit')) == 90.0

    def test_handle_reads_own_node(self, store):
        """Test an empty path reads the handle's own node."""
        gain = store.get_sub_data('robot.gain')
        assert gain.get_numeric_value(0.0) == 2.5


class TestLooseCoercion:
    """Tests for opt-in scalar coercion."""

    @pytest.fixture
    def loose(self):
        return DataStore({
            'flag': 'Yes',
            'count': '42',
            'ratio': 0.5,
            'on': True,
            'word': 'maybe',
        })

    def test_strict_by_default(self, loose):
        """Test no coercion without opting in."""
        assert loose.get_numeric_value(-1.0, 'count') == -1.0
        assert loose.get_boolean_value(False, 'flag') is False

    def test_per_call_coercion(self, loose):
        """Test coerce=True converts compatible scalars."""
        assert loose.get_numeric_value(-1.0, 'count', coerce=True) == 42.0
        assert loose.get_numeric_value(-1.0, 'on', coerce=True) == 1.0
        assert loose.get_boolean_value(False, 'flag', coerce=True) is True
        assert loose.get_boolean_value(False, 'ratio', coerce=True) is True
        assert loose.get_string_value('', 'ratio', coerce=True) == '0.5'
        assert loose.get_string_value('', 'on', coerce=True) == 'true'

    def test_integral_number_as_string(self):
        """Test integral numbers render without a fraction."""
        store = DataStore({'n': 3})
        assert store.get_string_value('', 'n', coerce=True) == '3'

    def test_unparseable_falls_back(self, loose):
        """Test strings that do not convert give the default."""
        assert loose.get_numeric_value(-1.0, 'word', coerce=True) == -1.0
        assert loose.get_boolean_value(True, 'word', coerce=True) is True

    def test_config_enables_coercion(self):
        """Test loose_coercion in the config sets the default."""
        store = DataStore({'count': '7'}, config=DataIOConfig(loose_coercion=True))
        assert store.get_numeric_value(0.0, 'count') == 7.0
        assert store.get_numeric_value(0.0, 'count', coerce=False) == 0.0

    def test_null_never_coerces(self):
        """Test null stays a miss even in loose mode."""
        store = DataStore({'nothing': None})
        assert store.get_string_value('d', 'nothing', coerce=True) == 'd'


class TestStructuralReads:
    """Tests for get_sub_data, get_list_size, has_key and keys."""

    def test_get_sub_data(self, store):
        """Test sub-handles address nodes inside the tree."""
        joint = store.get_sub_data('robot.joints.%d', 1)
        assert joint.get_string_value('', 'name') == 'elbow'

    def test_get_sub_data_missing(self, store):
        """Test a missing path gives None."""
        assert store.get_sub_data('robot.base') is None

    def test_get_sub_data_empty_path(self, store):
        """Test the empty path gives a handle on the same node."""
        assert store.get_sub_data().node is store.node

    def test_sub_data_shares_tree(self, store):
        """Test writes through a sub-handle are visible from the root."""
        joint = store.get_sub_data('robot.joints.0')
        joint.set_numeric_value('limit', 95)
        assert store.get_numeric_value(0.0, 'robot.joints.0.limit') == 95.0

    def test_idempotent_read(self, store):
        """Test two reads without writes give equal results."""
        first = store.get_sub_data('robot.joints')
        second = store.get_sub_data('robot.joints')
        assert first == second
        assert first.node is second.node

    def test_get_list_size(self, store):
        """Test list sizes."""
        assert store.get_list_size('robot.joints') == 2
        assert store.get_list_size('robot') == 0
        assert store.get_list_size('robot.missing') == 0
        assert store.get_sub_data('robot.joints').get_list_size() == 2

    def test_has_key(self, store):
        """Test key presence."""
        assert store.has_key('robot.joints.1.limit')
        assert not store.has_key('robot.joints.2')
        assert 'robot.name' in store
        assert 'robot.base' not in store

    def test_has_key_null_vs_default(self, store):
        """Test a null member is present but yields the default."""
        assert store.has_key('robot.payload') is True
        assert store.get_string_value('d', 'robot.payload') == 'd'

    def test_keys(self, store):
        """Test object member names."""
        assert store.keys('robot') == ['name', 'gain', 'enabled', 'payload', 'joints']
        assert store.keys('robot.joints') == []
        assert store.keys('missing') == []

    def test_getitem(self, store):
        """Test plain value access by path."""
        assert store['robot.joints.1'] == {'name': 'elbow', 'limit': 120.0}
        assert store[('robot', 'gain')] == 2.5
        with pytest.raises(NodeNotFoundError):
            store['robot.base']
        with pytest.raises(KeyError):
            store['robot.base']


class TestScalarWrites:
    """Tests for the setters."""

    def test_write_then_read(self):
        """Test a written string reads back."""
        store = DataStore()
        assert store.set_string_value('name', 'x') is True
        assert store.get_string_value('default', 'name') == 'x'

    def test_set_each_kind(self):
        """Test numeric, string, boolean and null writes."""
        store = DataStore()
        assert store.set_numeric_value('n', 3)
        assert store.set_string_value('s', 'text')
        assert store.set_boolean_value('b', False)
        assert store.set_null_value('z')
        assert store.to_python() == {'n': 3.0, 's': 'text', 'b': False, 'z': None}

    def test_nested_path_creation(self):
        """Test a 3-level write builds objects, a padded list and the value."""
        store = DataStore()
        assert store.set_numeric_value('%s.%s.%d', 4.5, 'a', 'b', 2)
        assert store.get_sub_data('a').kind is NodeKind.OBJECT
        assert store.get_sub_data('a.b').kind is NodeKind.LIST
        assert store.get_list_size('a.b') == 3
        assert store.get_numeric_value(0.0, 'a.b.2') == 4.5
        assert store.has_key('a.b.0') and store.has_key('a.b.1')
        assert store.get_sub_data('a.b.0').kind is NodeKind.NULL
        assert store.get_sub_data('a.b.1').kind is NodeKind.NULL

    def test_overwrite_scalar_of_any_kind(self, store):
        """Test scalars overwrite scalars of other kinds."""
        assert store.set_numeric_value('robot.name', 7)
        assert store.get_numeric_value(0.0, 'robot.name') == 7.0
        assert store.set_boolean_value('robot.gain', True)
        assert store.set_string_value('robot.payload', 'box')
        assert store.get_string_value('', 'robot.payload') == 'box'

    def test_write_onto_container_rejected(self, store):
        """Test scalars do not replace lists or objects."""
        before = store.copy()
        assert store.set_numeric_value('robot.joints', 1) is False
        assert store.set_string_value('robot', 'flat') is False
        assert store.set_null_value('robot.joints.0') is False
        assert store == before

    def test_write_through_scalar_rejected(self, store):
        """Test a path below a scalar is rejected atomically."""
        before = store.copy()
        assert store.set_numeric_value('robot.name.length.value', 3) is False
        assert store == before

    def test_append_key(self, store):
        """Test a None key appends to a list handle."""
        joints = store.get_sub_data('robot.joints')
        assert joints.set_string_value(None, 'wrist')
        assert store.get_list_size('robot.joints') == 3
        assert store.get_string_value('', 'robot.joints.2') == 'wrist'

    def test_append_on_object_rejected(self, store):
        """Test appending to an object fails."""
        assert store.set_numeric_value(None, 1) is False

    def test_append_via_placeholder(self):
        """Test %s with None appends inside a path."""
        store = DataStore()
        store.set_string_value('log.%s', 'boot', None)
        store.set_string_value('log.%s', 'ready', None)
        assert store.to_python() == {'log': ['boot', 'ready']}

    def test_int_key_on_list(self):
        """Test an int key addresses (and pads) a list handle."""
        store = DataStore()
        values = store.add_list('values')
        assert values.set_numeric_value(1, 5)
        assert store.to_python() == {'values': [None, 5.0]}

    def test_value_type_checked(self):
        """Test setters reject values of the wrong Python type."""
        store = DataStore()
        with pytest.raises(TypeError):
            store.set_numeric_value('n', '3')
        with pytest.raises(TypeError):
            store.set_numeric_value('n', True)
        with pytest.raises(TypeError):
            store.set_string_value('s', 3)
        with pytest.raises(TypeError):
            store.set_boolean_value('b', 1)

    def test_string_length_bound(self):
        """Test strings longer than max_value_length are rejected."""
        store = DataStore(config=DataIOConfig(max_value_length=4))
        assert store.set_string_value('s', 'abcd')
        assert store.set_string_value('s', 'abcde') is False
        assert store.get_string_value('', 's') == 'abcd'

    def test_path_length_bound(self):
        """Test paths longer than max_path_length are malformed."""
        store = DataStore(config=DataIOConfig(max_path_length=8))
        with pytest.raises(MalformedPathError):
            store.set_numeric_value('abcde.fghij', 1)
        with pytest.raises(MalformedPathError):
            store.get_numeric_value(0, 'abcde.fghij')

    def test_malformed_key(self):
        """Test setter path errors raise."""
        with pytest.raises(MalformedPathError):
            DataStore().set_numeric_value('a.%d', 1, 'x')


class TestContainers:
    """Tests for add_list and add_level."""

    def test_add_level(self):
        """Test add_level creates an object and returns its handle."""
        store = DataStore()
        motor = store.add_level('robot.motor')
        motor.set_numeric_value('gain', 2)
        assert store.get_numeric_value(0.0, 'robot.motor.gain') == 2.0

    def test_add_list(self):
        """Test add_list creates an empty list."""
        store = DataStore()
        axes = store.add_list('axes')
        assert axes.kind is NodeKind.LIST
        assert store.get_list_size('axes') == 0

    def test_append_semantics(self):
        """Test N appends give N elements in call order."""
        store = DataStore()
        items = store.add_list('items')
        for n in range(5):
            element = items.add_list(None)
            element.set_numeric_value(None, n)
            assert items.get_list_size() == n + 1
        assert store.to_python() == {'items': [[0.0], [1.0], [2.0], [3.0], [4.0]]}

    def test_append_levels(self):
        """Test add_level() with no key appends objects."""
        store = DataStore()
        joints = store.add_list('joints')
        for name in ('hip', 'knee'):
            joints.add_level().set_string_value('name', name)
        assert store.get_string_value('', 'joints.%d.name', 1) == 'knee'

    def test_existing_container_reused(self, store):
        """Test adding an existing container returns it unchanged."""
        joints = store.add_list('robot.joints')
        assert joints.get_list_size() == 2
        robot = store.add_level('robot')
        assert robot.get_string_value('', 'name') == 'arm'

    def test_null_slot_becomes_container(self, store):
        """Test a null slot can be turned into a container."""
        payload = store.add_level('robot.payload')
        payload.set_numeric_value('mass', 1.2)
        assert store.get_numeric_value(0.0, 'robot.payload.mass') == 1.2

    def test_conflict_rejection(self):
        """Test add_level on a string raises and keeps the string."""
        store = DataStore()
        store.set_string_value('a', 'text')
        with pytest.raises(TypeConflictError):
            store.add_level('a')
        assert store.get_string_value('', 'a') == 'text'

    def test_list_on_object_conflict(self, store):
        """Test add_list on an object raises."""
        with pytest.raises(TypeConflictError):
            store.add_list('robot')
        with pytest.raises(TypeConflictError):
            store.add_level('robot.joints')

    def test_add_with_placeholders(self):
        """Test container keys accept path arguments."""
        store = DataStore()
        store.add_level('robots.%s', 'arm').set_boolean_value('enabled', True)
        assert store.get_boolean_value(False, 'robots.arm.enabled') is True


class TestSubtrees:
    """Tests for set_sub_data, remove_key and copy."""

    def test_set_sub_data_copies(self, store):
        """Test grafted data is copied, never aliased."""
        other = DataStore({'mass': 3})
        assert store.set_sub_data('robot.tool', other)
        other.set_numeric_value('mass', 9)
        assert store.get_numeric_value(0.0, 'robot.tool.mass') == 3.0

    def test_set_sub_data_from_itself(self, store):
        """Test a tree can be grafted into itself without cycles."""
        assert store.set_sub_data('backup', store.get_sub_data('robot'))
        store.set_string_value('robot.name', 'changed')
        assert store.get_string_value('', 'backup.name') == 'arm'

    def test_set_sub_data_plain_data(self):
        """Test plain Python data is accepted."""
        store = DataStore()
        assert store.set_sub_data('limits', [1, 2])
        assert store.get_list_size('limits') == 2

    def test_set_sub_data_same_kind_replaces(self, store):
        """Test a list replaces a list."""
        assert store.set_sub_data('robot.joints', [])
        assert store.get_list_size('robot.joints') == 0

    def test_set_sub_data_conflict(self, store):
        """Test shape changes are rejected."""
        before = store.copy()
        assert store.set_sub_data('robot.joints', {'a': 1}) is False
        assert store.set_sub_data('robot.name', [1]) is False
        assert store == before

    def test_remove_key(self, store):
        """Test members and elements can be removed."""
        assert store.remove_key('robot.payload')
        assert not store.has_key('robot.payload')
        assert store.remove_key('robot.joints.%d', 0)
        assert store.get_string_value('', 'robot.joints.0.name') == 'elbow'
        assert store.remove_key('robot.base') is False
        assert store.remove_key('nothing.here') is False

    def test_remove_then_change_shape(self, store):
        """Test remove_key allows replacing a scalar with a container."""
        assert store.remove_key('robot.name')
        store.add_level('robot.name').set_string_value('first', 'arm')
        assert store.get_string_value('', 'robot.name.first') == 'arm'

    def test_remove_root_raises(self, store):
        """Test the empty path cannot be removed."""
        with pytest.raises(MalformedPathError):
            store.remove_key('')

    def test_copy_is_independent(self, store):
        """Test copy() snapshots the subtree."""
        snapshot = store.copy()
        store.set_numeric_value('robot.gain', 0)
        assert snapshot.get_numeric_value(0.0, 'robot.gain') == 2.5
        assert snapshot != store

    def test_copy_of_sub_handle(self, store):
        """Test copying a sub-handle gives a new root."""
        joints = store.get_sub_data('robot.joints').copy()
        assert joints.get_list_size() == 2
        assert joints.config is store.config


class TestIteration:
    """Tests for walk."""

    def test_walk(self):
        """Test walk yields paths depth-first."""
        store = DataStore({'a': {'b': 1}, 'c': [True]})
        paths = [path for path, node in store.walk()]
        assert paths == ['a', 'a.b', 'c', 'c.0']

    def test_walk_nodes(self):
        """Test walk yields the nodes."""
        store = DataStore({'a': 1})
        [(path, node)] = list(store.walk())
        assert node.value == 1.0

    def test_walk_scalar_root(self):
        """Test walking a scalar yields nothing."""
        assert list(DataStore(5).walk()) == []


class TestDigitKeys:
    """Tests for digit segments on decoded documents."""

    @pytest.fixture
    def services(self):
        return load_string_data('{"ports": {"8080": "http", "443": "https"}, "hosts": ["a", "b"]}')

    def test_read_digit_member(self, services):
        """Test a digit segment reads an object member."""
        assert services.get_string_value('none', 'ports.8080') == 'http'
        assert services.has_key('ports.443')
        assert services.get_string_value('none', 'ports.22') == 'none'

    def test_read_digit_index(self, services):
        """Test a digit segment still indexes a list."""
        assert services.get_string_value('', 'hosts.1') == 'b'

    def test_overwrite_digit_member(self, services):
        """Test writing an existing digit member."""
        assert services.set_string_value('ports.8080', 'proxy')
        assert services.get_string_value('', 'ports.8080') == 'proxy'
        assert services.keys('ports') == ['8080', '443']

    def test_add_digit_member(self, services):
        """Test adding a digit member to an existing object."""
        assert services.set_string_value('ports.22', 'ssh')
        assert services.get_list_size('ports') == 0
        assert services.keys('ports') == ['8080', '443', '22']

    def test_digit_member_on_empty_tree(self):
        """Test a digit segment on a missing level creates an object."""
        store = DataStore()
        assert store.set_string_value('ports.8080', 'x')
        assert store.get_sub_data('ports').kind is NodeKind.OBJECT
        assert store.get_list_size('ports') == 0
        assert store.to_python() == {'ports': {'8080': 'x'}}

    def test_index_arguments_create_lists(self):
        """Test %d and int keys are the way to create lists."""
        store = DataStore()
        assert store.set_string_value('ports.%d', 'x', 1)
        assert store.get_list_size('ports') == 2

    def test_remove_digit_member(self, services):
        """Test remove_key with a digit member and a digit index."""
        assert services.remove_key('ports.8080')
        assert services.keys('ports') == ['443']
        assert services.remove_key('hosts.0')
        assert services['hosts'] == ['b']

    def test_walk_paths_address_nodes(self, services):
        """Test paths produced by walk() read back their nodes."""
        for path, node in services.walk():
            assert services.get_sub_data(path).node is node


class TestListPaddingBound:
    """Tests for config.max_list_padding."""

    def test_far_index_rejected(self):
        """Test a setter refuses to pad a list past the bound."""
        store = DataStore()
        assert store.set_numeric_value('a.%d', 1, 10**9) is False
        assert store == DataStore()

    def test_default_bound(self):
        """Test the default bound allows 1024 padding elements."""
        store = DataStore()
        assert store.set_numeric_value('a.%d', 1, 1024)
        assert store.get_list_size('a') == 1025
        assert store.set_numeric_value('b.%d', 1, 1025) is False

    def test_custom_bound(self):
        """Test a config with a smaller bound."""
        store = DataStore(config=DataIOConfig(max_list_padding=2))
        values = store.add_list('values')
        assert values.set_numeric_value(2, 1.0)
        assert values.set_numeric_value(6, 1.0) is False
        assert values.set_sub_data(6, [1]) is False
        assert values.get_list_size() == 3

    def test_unbounded(self):
        """Test None disables the bound."""
        store = DataStore(config=DataIOConfig(max_list_padding=None))
        assert store.set_null_value('a.%d', 2000)
        assert store.get_list_size('a') == 2001

    def test_add_list_raises(self):
        """Test add_list and add_level raise over the bound."""
        store = DataStore(config=DataIOConfig(max_list_padding=0))
        with pytest.raises(PaddingLimitError):
            store.add_list('a.%d', 1)
        with pytest.raises(PaddingLimitError):
            store.add_level('a.%d', 3)
        assert store == DataStore()
