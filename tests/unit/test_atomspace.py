"""Unit tests for AtomSpace storage and the embedding buffer.

Tests cover:
- Atom and link creation
- Capacity limits
- Name lookup (first match, case-sensitive)
- Same-space enforcement for links
- Embedding buffer allocation and teardown
"""

import numpy as np
import pytest

from plnspace.schema import AtomType, AtomSpaceConfig, DEFAULT_TRUTH
from plnspace.atomspace import (
    Atom,
    AtomSpace,
    EmbeddingBuffer,
    tv_create,
)


@pytest.fixture
def space():
    """An empty AtomSpace with room for 100 atoms."""
    with AtomSpace(capacity=100, embedding_dim=32) as s:
        yield s


# ==============================================================================
# Atom Creation Tests
# ==============================================================================


class TestAtomSpaceInit:
    """Test AtomSpace construction."""

    def test_empty_space(self, space):
        """A new space is empty with the requested shape."""
        assert space.capacity == 100
        assert space.embedding_dim == 32
        assert len(space) == 0
        assert not space.is_full

    def test_negative_capacity(self):
        """Negative capacity is a programming error."""
        with pytest.raises(ValueError):
            AtomSpace(capacity=-1)

    def test_from_config(self):
        """Config builds a space with the configured shape."""
        space = AtomSpace.from_config(AtomSpaceConfig(capacity=10, embedding_dim=4))
        assert space.capacity == 10
        assert space.embedding_dim == 4


class TestCreateAtom:
    """Test node creation."""

    def test_create_node(self, space):
        """Created node carries its type, name and truth value."""
        tv = tv_create(0.8, 0.9, 5.0)
        atom = space.create_atom(AtomType.CONCEPT_NODE, "TestConcept", tv)

        assert atom is not None
        assert atom.type == AtomType.CONCEPT_NODE
        assert atom.name == "TestConcept"
        assert atom.truth_value.strength == 0.8
        assert atom.truth_value.confidence == 0.9
        assert atom.outgoing == ()
        assert atom.handle == 0
        assert len(space) == 1

    def test_default_truth_value(self, space):
        """Atoms created without a truth value get DEFAULT_TRUTH."""
        atom = space.create_atom(AtomType.CONCEPT_NODE, "X")
        assert atom.truth_value == DEFAULT_TRUTH

    def test_handles_follow_creation_order(self, space):
        """Handles index atoms in creation order."""
        a = space.create_atom(AtomType.CONCEPT_NODE, "A")
        b = space.create_atom(AtomType.PREDICATE_NODE, "B")
        assert (a.handle, b.handle) == (0, 1)
        assert space[1] is b
        assert list(space) == [a, b]

    def test_data_payload(self, space):
        """Opaque payload is stored as given."""
        atom = space.create_atom(AtomType.CONCEPT_NODE, "A", data={"source": "test"})
        assert atom.data == {"source": "test"}

    def test_atoms_compare_by_identity(self, space):
        """Two atoms with the same name and truth are distinct."""
        a1 = space.create_atom(AtomType.CONCEPT_NODE, "Same")
        a2 = space.create_atom(AtomType.CONCEPT_NODE, "Same")
        assert a1 != a2

    def test_returns_atom_instance(self, space):
        """Created objects are Atom instances."""
        assert isinstance(space.create_atom(AtomType.CONCEPT_NODE, "A"), Atom)


class TestCapacity:
    """Test that the space never grows past its capacity."""

    def test_full_space_rejects_atoms(self):
        """Creation on a full space returns None and changes nothing."""
        space = AtomSpace(capacity=3, embedding_dim=4)
        for name in ("A", "B", "C"):
            assert space.create_atom(AtomType.CONCEPT_NODE, name) is not None

        assert space.is_full
        assert space.create_atom(AtomType.CONCEPT_NODE, "D") is None
        assert len(space) == 3

    def test_full_space_rejects_links(self):
        """Link creation respects capacity too."""
        space = AtomSpace(capacity=2, embedding_dim=4)
        a = space.create_atom(AtomType.CONCEPT_NODE, "A")
        b = space.create_atom(AtomType.CONCEPT_NODE, "B")

        assert space.add_inheritance_edge(a, b) is None
        assert len(space) == 2

    def test_zero_capacity(self):
        """A zero-capacity space accepts nothing."""
        space = AtomSpace(capacity=0, embedding_dim=4)
        assert space.create_atom(AtomType.CONCEPT_NODE, "A") is None
        assert len(space) == 0


# ==============================================================================
# Lookup Tests
# ==============================================================================


class TestLookup:
    """Test name lookup."""

    def test_lookup_returns_atom(self, space):
        """Lookup finds a created atom."""
        atom = space.create_atom(AtomType.CONCEPT_NODE, "TestConcept")
        assert space.get("TestConcept") is atom

    def test_lookup_miss(self, space):
        """Unknown names return None."""
        space.create_atom(AtomType.CONCEPT_NODE, "Known")
        assert space.get("Unknown") is None

    def test_duplicate_names_first_wins(self, space):
        """Duplicate names are legal; the earliest atom is returned."""
        first = space.create_atom(AtomType.CONCEPT_NODE, "Dup")
        space.create_atom(AtomType.PREDICATE_NODE, "Dup")
        assert space.get("Dup") is first

    def test_case_sensitive(self, space):
        """Lookup distinguishes case."""
        space.create_atom(AtomType.CONCEPT_NODE, "Dog")
        assert space.get("dog") is None

    def test_links_have_no_name(self, space):
        """Links are never found by name."""
        a = space.create_atom(AtomType.CONCEPT_NODE, "A")
        b = space.create_atom(AtomType.CONCEPT_NODE, "B")
        link = space.add_inheritance_edge(a, b)
        assert link.name is None


# ==============================================================================
# Link Tests
# ==============================================================================


class TestCreateLink:
    """Test link creation."""

    def test_link_outgoing(self, space):
        """Links keep outgoing atoms as ordered handles."""
        a = space.create_atom(AtomType.CONCEPT_NODE, "A")
        b = space.create_atom(AtomType.CONCEPT_NODE, "B")
        tv = tv_create(0.9, 0.8, 10.0)

        link = space.create_link(AtomType.SIMILARITY_LINK, [a, b], tv)

        assert link.type == AtomType.SIMILARITY_LINK
        assert link.outgoing == (a.handle, b.handle)
        assert space.outgoing(link) == [a, b]
        assert link.truth_value == tv
        assert link.is_link

    def test_inheritance_edge(self, space):
        """add_inheritance_edge creates a two-atom InheritanceLink."""
        a = space.create_atom(AtomType.CONCEPT_NODE, "A")
        b = space.create_atom(AtomType.CONCEPT_NODE, "B")

        link = space.add_inheritance_edge(a, b, tv_create(0.9, 0.8, 1.0))

        assert link.type == AtomType.INHERITANCE_LINK
        assert space.outgoing(link) == [a, b]

    def test_link_over_link(self, space):
        """Links may point at other links."""
        a = space.create_atom(AtomType.CONCEPT_NODE, "A")
        b = space.create_atom(AtomType.CONCEPT_NODE, "B")
        inner = space.add_inheritance_edge(a, b)
        outer = space.create_link(AtomType.EVALUATION_LINK, [a, inner])
        assert space.outgoing(outer) == [a, inner]

    def test_empty_outgoing_rejected(self, space):
        """Links need at least one outgoing atom."""
        assert space.create_link(AtomType.INHERITANCE_LINK, []) is None
        assert len(space) == 0

    def test_node_type_link_rejected(self, space):
        """create_link only builds link types."""
        a = space.create_atom(AtomType.CONCEPT_NODE, "A")
        b = space.create_atom(AtomType.CONCEPT_NODE, "B")
        link = space.add_inheritance_edge(a, b)

        assert space.create_link(AtomType.CONCEPT_NODE, [link]) is None
        assert space.create_link(AtomType.LINK_NODE, [a, b]) is None
        assert len(space) == 3

    def test_link_type_node_rejected(self, space):
        """create_atom only builds node types."""
        assert space.create_atom(AtomType.INHERITANCE_LINK, "oops") is None
        assert space.create_atom(AtomType.EVALUATION_LINK) is None
        assert len(space) == 0

    def test_kind_matches_type(self, space):
        """Atom.is_link agrees with its type."""
        a = space.create_atom(AtomType.LINK_NODE, "A")
        b = space.create_atom(AtomType.PREDICATE_NODE, "B")
        link = space.create_link(AtomType.SIMILARITY_LINK, [a, b])

        for atom in space:
            assert atom.is_link == atom.type.is_link
        assert link.is_link

    def test_foreign_atom_rejected(self, space):
        """Links cannot point into another space."""
        other = AtomSpace(capacity=10, embedding_dim=4)
        foreign = other.create_atom(AtomType.CONCEPT_NODE, "Foreign")
        local = space.create_atom(AtomType.CONCEPT_NODE, "Local")

        assert space.add_inheritance_edge(local, foreign) is None
        assert len(space) == 1
        assert not space.owns(foreign)
        assert space.owns(local)

    def test_foreign_atom_with_colliding_handle_rejected(self, space):
        """Ownership is checked by identity, not by handle."""
        other = AtomSpace(capacity=10, embedding_dim=4)
        foreign = other.create_atom(AtomType.CONCEPT_NODE, "A")
        space.create_atom(AtomType.CONCEPT_NODE, "A")

        assert foreign.handle == 0
        assert not space.owns(foreign)


# ==============================================================================
# Embedding Tests
# ==============================================================================


class TestEmbeddings:
    """Test the embedding buffer attached to atoms."""

    def test_atom_embedding_is_row_view(self, space):
        """Each atom gets a float32 row view into the shared block."""
        atom = space.create_atom(AtomType.CONCEPT_NODE, "A")

        assert atom.embedding.shape == (32,)
        assert atom.embedding.dtype == np.float32
        assert np.shares_memory(atom.embedding, space.embeddings.view(0))

    def test_zero_initialized_without_rng(self, space):
        """Without a generator the block is zero-filled."""
        atom = space.create_atom(AtomType.CONCEPT_NODE, "A")
        assert not atom.embedding.any()

    def test_random_initialization_range(self):
        """With a generator, values are drawn from [-1, 1]."""
        buffer = EmbeddingBuffer(10, 8, rng=np.random.default_rng(0))
        row = buffer.view(3)
        assert np.all(row >= -1.0) and np.all(row <= 1.0)
        assert row.any()

    def test_seeded_config_is_deterministic(self):
        """Same seed gives identical embeddings."""
        config = AtomSpaceConfig(capacity=4, embedding_dim=8, seed=7)
        s1 = AtomSpace.from_config(config)
        s2 = AtomSpace.from_config(config)
        a1 = s1.create_atom(AtomType.CONCEPT_NODE, "A")
        a2 = s2.create_atom(AtomType.CONCEPT_NODE, "A")
        assert np.array_equal(a1.embedding, a2.embedding)

    def test_zero_width(self):
        """Zero-width embeddings leave atoms without a view."""
        space = AtomSpace(capacity=2, embedding_dim=0)
        atom = space.create_atom(AtomType.CONCEPT_NODE, "A")
        assert atom.embedding is None

    def test_buffer_size(self):
        """Buffer holds capacity x width float32 values."""
        buffer = EmbeddingBuffer(100, 32)
        assert buffer.nbytes == 100 * 32 * 4

    def test_negative_shape(self):
        """Negative shapes are rejected."""
        with pytest.raises(ValueError):
            EmbeddingBuffer(10, -1)

    def test_view_out_of_range(self):
        """Rows outside the block raise IndexError."""
        buffer = EmbeddingBuffer(2, 4)
        with pytest.raises(IndexError):
            buffer.view(2)

    def test_scoped_release(self):
        """The context manager releases the block on exit."""
        with EmbeddingBuffer(4, 4) as buffer:
            assert buffer.allocated
        assert not buffer.allocated
        assert buffer.nbytes == 0
        with pytest.raises(RuntimeError):
            buffer.view(0)


# ==============================================================================
# Teardown Tests
# ==============================================================================


class TestClose:
    """Test whole-space teardown."""

    def test_close_drops_everything(self):
        """close() drops atoms and releases embeddings."""
        space = AtomSpace(capacity=10, embedding_dim=4)
        space.create_atom(AtomType.CONCEPT_NODE, "A")
        buffer = space.embeddings

        space.close()

        assert len(space) == 0
        assert space.embeddings is None
        assert not buffer.allocated

    def test_closed_space_rejects_atoms(self):
        """A closed space creates nothing."""
        space = AtomSpace(capacity=10, embedding_dim=4)
        space.close()
        assert space.create_atom(AtomType.CONCEPT_NODE, "A") is None

    def test_close_twice(self):
        """Closing twice is harmless."""
        space = AtomSpace(capacity=10, embedding_dim=4)
        space.close()
        space.close()
        assert len(space) == 0