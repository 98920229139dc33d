"""Tests for directives.py - immutable Cache-Control directive sets.

Test Coverage:
- Value semantics of every with_* builder
- Clamping of seconds and removal of false flags
- public/private exclusivity and the type discriminator
- Context vocabulary (request vs response) enforcement
- Strict bulk construction from mappings
- Normalisation of entries passed straight to the constructor
"""

import dataclasses
from unittest import TestCase

import pytest

from CacheHeaders.cache_control import parse_cache_control
from CacheHeaders.directives import CacheContext, Directive, DirectiveSet
from CacheHeaders.errors import InvalidDirectiveType, InvalidDirectiveValue, UnknownDirective


class TestDirectiveVocabulary(TestCase):
    """Tests for Directive and CacheContext."""

    def test_lookup_is_case_insensitive(self) -> None:
        self.assertIs(Directive.lookup(" Max-Age "), Directive.MAX_AGE)
        self.assertIsNone(Directive.lookup("foo"))
        self.assertIsNone(Directive.lookup(None))

    def test_flag_and_seconds_kinds(self) -> None:
        self.assertTrue(Directive.NO_CACHE.is_flag)
        self.assertTrue(Directive.PUBLIC.is_flag)
        self.assertFalse(Directive.MAX_AGE.is_flag)
        self.assertFalse(Directive.MIN_FRESH.is_flag)

    def test_shared_directives_in_both_contexts(self) -> None:
        for name in ("max-age", "no-cache", "no-store", "no-transform"):
            with self.subTest(name=name):
                self.assertIsNotNone(CacheContext.REQUEST.recognizes(name))
                self.assertIsNotNone(CacheContext.RESPONSE.recognizes(name))

    def test_context_specific_directives(self) -> None:
        self.assertIsNone(CacheContext.REQUEST.recognizes("s-maxage"))
        self.assertIsNone(CacheContext.REQUEST.recognizes("public"))
        self.assertIsNone(CacheContext.RESPONSE.recognizes("max-stale"))
        self.assertIsNone(CacheContext.RESPONSE.recognizes("only-if-cached"))
        self.assertIs(CacheContext.REQUEST.recognizes("min-fresh"), Directive.MIN_FRESH)
        self.assertIs(
            CacheContext.RESPONSE.recognizes("proxy-revalidate"), Directive.PROXY_REVALIDATE
        )


class TestDirectiveSetValueSemantics(TestCase):
    """Every builder returns a new set and leaves the original alone."""

    def test_empty_set(self) -> None:
        directives = DirectiveSet.for_response()
        self.assertEqual(len(directives), 0)
        self.assertEqual(str(directives), "")
        self.assertIs(directives.context, CacheContext.RESPONSE)

    def test_builder_returns_new_instance(self) -> None:
        original = DirectiveSet.for_response()
        updated = original.with_max_age(60)
        self.assertIsNot(original, updated)
        self.assertEqual(original.entries, ())
        self.assertEqual(updated.entries, (("max-age", 60),))

    def test_directive_set_is_frozen(self) -> None:
        directives = DirectiveSet.for_response().with_max_age(60)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            directives.entries = ()  # type: ignore[misc]

    def test_equal_sets_are_equal_and_hashable(self) -> None:
        first = DirectiveSet.for_response().with_public().with_max_age(600)
        second = DirectiveSet.for_response().with_public().with_max_age(600)
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))

    def test_contexts_are_part_of_identity(self) -> None:
        self.assertNotEqual(
            DirectiveSet.for_request().with_max_age(5),
            DirectiveSet.for_response().with_max_age(5),
        )

    def test_chained_builders_do_not_alias(self) -> None:
        base = DirectiveSet.for_response().with_no_cache()
        with_store = base.with_no_store()
        without_cache = base.with_no_cache(False)
        self.assertEqual(base.names(), ("no-cache",))
        self.assertEqual(with_store.names(), ("no-cache", "no-store"))
        self.assertEqual(without_cache.names(), ())


class TestDirectiveSetMutators(TestCase):
    """Tests for directive setters."""

    def test_negative_seconds_are_clamped(self) -> None:
        self.assertEqual(DirectiveSet.for_response().with_max_age(-200).max_age, 0)

    def test_seconds_are_coerced_to_int(self) -> None:
        self.assertEqual(DirectiveSet.for_response().with_max_age("5").max_age, 5)

    def test_non_integer_seconds_rejected(self) -> None:
        with self.assertRaises(InvalidDirectiveValue) as ctx:
            DirectiveSet.for_response().with_max_age("abc")
        self.assertEqual(ctx.exception.name, "max-age")
        self.assertEqual(ctx.exception.value, "abc")
        with self.assertRaises(InvalidDirectiveValue):
            DirectiveSet.for_request().with_min_fresh(object())

    def test_none_removes_seconds(self) -> None:
        directives = DirectiveSet.for_response().with_max_age(60).with_max_age(None)
        self.assertNotIn("max-age", directives)

    def test_false_removes_flag(self) -> None:
        directives = DirectiveSet.for_response().with_no_store().with_no_store(False)
        self.assertFalse(directives.no_store)
        self.assertEqual(len(directives), 0)

    def test_false_flag_on_empty_set_is_noop(self) -> None:
        self.assertEqual(DirectiveSet.for_response().with_no_transform(False).entries, ())

    def test_replacing_keeps_position(self) -> None:
        directives = (
            DirectiveSet.for_response().with_max_age(5).with_no_cache().with_max_age(10)
        )
        self.assertEqual(str(directives), "max-age=10, no-cache")

    def test_public_removes_private(self) -> None:
        directives = DirectiveSet.for_response().with_private().with_public()
        self.assertTrue(directives.is_public)
        self.assertFalse(directives.is_private)

    def test_private_removes_public(self) -> None:
        directives = DirectiveSet.for_response().with_public().with_private()
        self.assertTrue(directives.is_private)
        self.assertFalse(directives.is_public)

    def test_disabling_public_keeps_private(self) -> None:
        directives = DirectiveSet.for_response().with_private().with_public(False)
        self.assertTrue(directives.is_private)
        self.assertFalse(directives.is_public)

    def test_with_type(self) -> None:
        self.assertTrue(DirectiveSet.for_response().with_type("public").is_public)
        self.assertTrue(DirectiveSet.for_response().with_type("private").is_private)

    def test_with_invalid_type(self) -> None:
        with pytest.raises(InvalidDirectiveType) as excinfo:
            DirectiveSet.for_response().with_type("foo")
        assert str(excinfo.value) == (
            'Invalid cache control type "foo", valid values are "public" and "private".'
        )
        assert excinfo.value.value == "foo"

    def test_response_directives(self) -> None:
        directives = (
            DirectiveSet.for_response()
            .with_shared_max_age(120)
            .with_stale_while_revalidate(30)
            .with_stale_if_error(600)
            .with_must_revalidate()
            .with_proxy_revalidate()
        )
        self.assertEqual(directives.shared_max_age, 120)
        self.assertEqual(directives.stale_while_revalidate, 30)
        self.assertEqual(directives.stale_if_error, 600)
        self.assertTrue(directives.must_revalidate)
        self.assertTrue(directives.proxy_revalidate)

    def test_request_directives(self) -> None:
        directives = (
            DirectiveSet.for_request()
            .with_max_stale(30)
            .with_min_fresh(10)
            .with_only_if_cached()
            .with_no_cache()
        )
        self.assertEqual(directives.max_stale, 30)
        self.assertEqual(directives.min_fresh, 10)
        self.assertTrue(directives.only_if_cached)
        self.assertTrue(directives.no_cache)
        self.assertEqual(str(directives), "max-stale=30, min-fresh=10, only-if-cached, no-cache")

    def test_response_directive_rejected_on_request(self) -> None:
        request = DirectiveSet.for_request()
        for builder in (request.with_public, request.with_private, request.with_must_revalidate):
            with self.subTest(builder=builder.__name__):
                with self.assertRaises(UnknownDirective):
                    builder()
        with self.assertRaises(UnknownDirective):
            request.with_shared_max_age(10)

    def test_request_directive_rejected_on_response(self) -> None:
        response = DirectiveSet.for_response()
        with self.assertRaises(UnknownDirective) as ctx:
            response.with_max_stale(10)
        self.assertEqual(ctx.exception.name, "max-stale")
        self.assertEqual(ctx.exception.context, "response")
        with self.assertRaises(UnknownDirective):
            response.with_only_if_cached()

    def test_unknown_directive_rejected(self) -> None:
        with pytest.raises(UnknownDirective, match="Unknown cache control directive: foo"):
            DirectiveSet.for_response().with_directive("foo", True)

    def test_with_directive_routes_public_through_exclusive_setter(self) -> None:
        directives = DirectiveSet.for_response().with_private().with_directive("public", True)
        self.assertEqual(directives.names(), ("public",))

    def test_without(self) -> None:
        directives = DirectiveSet.for_response().with_no_cache().with_extension("foo", "bar")
        self.assertEqual(directives.without("FOO").names(), ("no-cache",))
        self.assertIs(directives.without("missing"), directives)


class TestDirectiveSetExtensions(TestCase):
    """Tests for custom extension directives."""

    def test_with_extension(self) -> None:
        directives = DirectiveSet.for_response().with_extension("foo", "bar")
        self.assertEqual(directives.extension("foo"), "bar")
        self.assertEqual(str(directives), 'foo="bar"')

    def test_extension_value_is_trimmed(self) -> None:
        directives = DirectiveSet.for_response().with_extension("foo", ' "bar" ')
        self.assertEqual(directives.extension("foo"), "bar")

    def test_extension_requires_strings(self) -> None:
        with self.assertRaises(TypeError):
            DirectiveSet.for_response().with_extension("foo", 5)  # type: ignore[arg-type]
        with self.assertRaises(TypeError):
            DirectiveSet.for_response().with_extension(None, "bar")  # type: ignore[arg-type]

    def test_extension_cannot_shadow_a_directive(self) -> None:
        for name in ("max-age", "Public", " no-store "):
            with self.subTest(name=name):
                with self.assertRaises(ValueError):
                    DirectiveSet.for_response().with_extension(name, "5")
        with self.assertRaises(ValueError):
            DirectiveSet.for_request().with_extension("max-stale", "5")

    def test_extension_may_reuse_a_directive_of_the_other_context(self) -> None:
        directives = DirectiveSet.for_response().with_extension("max-stale", "30")
        self.assertEqual(directives.extension("max-stale"), "30")
        self.assertEqual(parse_cache_control(str(directives)), directives)

    def test_extension_accessor_ignores_non_strings(self) -> None:
        directives = DirectiveSet.for_response().with_max_age(5)
        self.assertIsNone(directives.extension("max-age"))
        self.assertIsNone(directives.extension("missing"))


class TestDirectiveSetFromMapping(TestCase):
    """Tests for the strict bulk constructor."""

    def test_type_and_max_age(self) -> None:
        directives = DirectiveSet.from_mapping({"type": "public", "max-age": 600})
        self.assertEqual(str(directives), "public, max-age=600")

    def test_false_flags_are_skipped(self) -> None:
        directives = DirectiveSet.from_mapping({"must-revalidate": True, "no-cache": False})
        self.assertEqual(str(directives), "must-revalidate")

    def test_invalid_type(self) -> None:
        with self.assertRaises(InvalidDirectiveType):
            DirectiveSet.from_mapping({"type": "foo"})

    def test_unknown_directive(self) -> None:
        with self.assertRaises(UnknownDirective):
            DirectiveSet.from_mapping({"foo": "bar"})

    def test_non_integer_seconds(self) -> None:
        with self.assertRaises(InvalidDirectiveValue) as ctx:
            DirectiveSet.from_mapping({"max-age": "abc"})
        self.assertEqual(ctx.exception.name, "max-age")

    def test_request_context(self) -> None:
        directives = DirectiveSet.from_mapping(
            {"max-stale": 30, "only-if-cached": True}, CacheContext.REQUEST
        )
        self.assertEqual(str(directives), "max-stale=30, only-if-cached")
        with self.assertRaises(UnknownDirective):
            DirectiveSet.from_mapping({"type": "public"}, CacheContext.REQUEST)


class TestDirectiveSetConstructor(TestCase):
    """Entries given to the constructor get the same normalisation as builders."""

    def test_seconds_are_clamped_and_names_lowered(self) -> None:
        directives = DirectiveSet(entries=(("MAX-AGE", -5), ("No-Store", True)))
        self.assertEqual(directives.entries, (("max-age", 0), ("no-store", True)))
        self.assertEqual(directives.max_age, 0)
        self.assertEqual(str(directives), "max-age=0, no-store")

    def test_seconds_strings_are_coerced(self) -> None:
        directives = DirectiveSet(entries=(("s-maxage", "30"),))
        self.assertEqual(directives.shared_max_age, 30)

    def test_non_integer_seconds_rejected(self) -> None:
        with self.assertRaises(InvalidDirectiveValue):
            DirectiveSet(entries=(("max-age", "soon"),))

    def test_unknown_flag_rejected(self) -> None:
        with self.assertRaises(UnknownDirective) as ctx:
            DirectiveSet(entries=(("max-age", -5), ("Bogus", True)))
        self.assertEqual(ctx.exception.name, "bogus")

    def test_directive_of_other_context_needs_string_value(self) -> None:
        with self.assertRaises(UnknownDirective):
            DirectiveSet(context=CacheContext.REQUEST, entries=(("public", True),))
        directives = DirectiveSet(context=CacheContext.REQUEST, entries=(("public", "1"),))
        self.assertEqual(directives.extension("public"), "1")

    def test_string_context_is_coerced(self) -> None:
        directives = DirectiveSet(context="request", entries=(("max-stale", 10),))
        self.assertIs(directives.context, CacheContext.REQUEST)
        self.assertEqual(directives, DirectiveSet.for_request().with_max_stale(10))

    def test_false_flags_and_none_seconds_are_left_out(self) -> None:
        directives = DirectiveSet(entries=(("no-cache", False), ("max-age", None)))
        self.assertEqual(directives.entries, ())

    def test_public_and_private_last_wins(self) -> None:
        directives = DirectiveSet(entries=(("public", True), ("private", True)))
        self.assertEqual(directives.names(), ("private",))

    def test_duplicate_names_keep_first_position(self) -> None:
        directives = DirectiveSet(entries=(("max-age", 5), ("no-cache", True), ("MAX-AGE", 9)))
        self.assertEqual(directives.entries, (("max-age", 9), ("no-cache", True)))
