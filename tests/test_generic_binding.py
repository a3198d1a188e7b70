# SPDX-PackageName: callsite
# SPDX-License-Identifier: Apache-2.0
# SPDX-FileCopyrightText: Copyright the callsite authors and contributors.

import unittest

from callsite import (
    GenericInferenceError,
    InvocationError,
    Ref,
    SignatureStyle,
    TypeCatalog,
    invoke_generic,
    render_signature,
)
from callsite._internal._generic_binding import (
    explicit_element_type,
    infer_element_types,
    infer_generic_arguments,
    resolve_generic,
    select_kind,
    unwrap_value,
)

from tests.sample_types import (
    Box,
    Collector,
    Converter,
    Processor,
    Tagger,
    Wrapped,
)


class TestInferGenericArguments(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = TypeCatalog()
        self.int_t = self.catalog.describe(int)
        self.str_t = self.catalog.describe(str)

    def method(self, tp, name):
        return [
            m for m in self.catalog.describe(tp).methods if m.name == name
        ]

    def test_single_slot(self) -> None:
        (tag,) = self.method(Tagger, "tag")
        self.assertEqual(
            infer_generic_arguments(tag, [self.int_t, self.str_t]),
            (self.int_t,),
        )
        # non-slot parameters must match exactly
        self.assertIsNone(
            infer_generic_arguments(tag, [self.int_t, self.int_t])
        )
        self.assertIsNone(infer_generic_arguments(tag, [self.int_t]))

    def test_conflicting_slots(self) -> None:
        (pair,) = self.method(Tagger, "pair")
        self.assertEqual(
            infer_generic_arguments(pair, [self.str_t, self.str_t]),
            (self.str_t,),
        )
        self.assertIsNone(
            infer_generic_arguments(pair, [self.int_t, self.str_t])
        )

    def test_bound_violation(self) -> None:
        (bounded,) = self.method(Tagger, "bounded")
        bool_t = self.catalog.describe(bool)
        self.assertEqual(infer_generic_arguments(bounded, [bool_t]), (bool_t,))
        self.assertIsNone(infer_generic_arguments(bounded, [self.str_t]))

    def test_fewest_generic_parameters_win(self) -> None:
        candidates = self.method(Converter, "convert")
        chosen = resolve_generic(candidates, [self.int_t, self.str_t])
        self.assertIs(chosen.generic_definition, candidates[1])
        self.assertEqual(chosen.generic_arguments, (self.int_t,))
        self.assertFalse(chosen.is_generic)

        chosen = resolve_generic(candidates, [self.int_t, self.int_t])
        self.assertIs(chosen.generic_definition, candidates[0])
        self.assertEqual(chosen.generic_arguments, (self.int_t, self.int_t))

    def test_exact_match_wins(self) -> None:
        candidates = self.method(Processor, "process")
        chosen = resolve_generic(candidates, [self.str_t])
        self.assertIs(chosen, candidates[1])
        self.assertIsNone(resolve_generic(candidates, [self.int_t, self.int_t]))

    def test_select_kind(self) -> None:
        box_methods = self.catalog.describe(Box).methods
        self.assertEqual(
            [m.name for m in select_kind(box_methods, "new", False)],
            ["__init__"],
        )
        self.assertEqual(
            [m.name for m in select_kind(box_methods, "*", True)],
            ["of", "empty"],
        )
        self.assertNotIn(
            "of", [m.name for m in select_kind(box_methods, "*", False)]
        )


class TestInvokeGeneric(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = TypeCatalog()

    def invoke(self, target, name, args, **kwargs):
        return invoke_generic(
            target, name, args, catalog=self.catalog, **kwargs
        )

    def test_closes_and_calls(self) -> None:
        self.assertEqual(self.invoke(Tagger(), "tag", [42, "x"]), "x:42")

    def test_unwraps_arguments(self) -> None:
        self.assertEqual(
            self.invoke(Tagger(), "tag", [Wrapped(5), "w"]), "w:5"
        )

    def test_unwrap_cycle(self) -> None:
        w = Wrapped(None)
        w.__wrapped__ = w
        self.assertIs(unwrap_value(w), w)

    def test_explicit_parameter_types(self) -> None:
        self.assertEqual(
            self.invoke(
                Tagger(), "tag", [True, "y"], explicit_param_types=[int, str]
            ),
            "y:True",
        )

    def test_overloads(self) -> None:
        self.assertEqual(self.invoke(Converter(), "convert", [1, "a"]), "a=1")
        self.assertEqual(self.invoke(Converter(), "convert", [1, 2]), "2=1")

    def test_static(self) -> None:
        box = self.invoke(Box, "of", [3], is_static=True)
        self.assertIsInstance(box, Box)
        self.assertEqual(box.get(), 3)

    def test_constructor_of_closed_generic(self) -> None:
        box = self.invoke(Box[str], "new", ["x"])
        self.assertEqual(box.get(), "x")
        self.assertEqual(
            self.catalog.type_of(box).display_name, "Box[str]"
        )

    def test_conflict(self) -> None:
        with self.assertRaises(GenericInferenceError) as cm:
            self.invoke(Tagger(), "pair", [1, "a"])
        e = cm.exception
        self.assertEqual(e.type_name, "tests.sample_types.Tagger")
        self.assertEqual(e.member_name, "pair")
        self.assertEqual([m.name for m in e.candidates], ["pair"])
        self.assertIn("pair(first: U, second: U)", str(e))
        self.assertIn("(int, str)", str(e))

    def test_bound_violation(self) -> None:
        self.assertEqual(self.invoke(Tagger(), "bounded", [3]), 4)
        with self.assertRaises(GenericInferenceError):
            self.invoke(Tagger(), "bounded", ["x"])

    def test_unknown_member(self) -> None:
        with self.assertRaisesRegex(GenericInferenceError, "Tagger.nope"):
            self.invoke(Tagger(), "nope", [])

    def test_wrong_kind(self) -> None:
        with self.assertRaises(GenericInferenceError):
            self.invoke(Tagger(), "tag", [1, "x"], is_static=True)

    def test_call_failure(self) -> None:
        with self.assertRaises(InvocationError) as cm:
            self.invoke(Processor(), "fail", [1])
        self.assertIsInstance(cm.exception.cause, RuntimeError)


class TestArrayAndRefParameters(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = TypeCatalog()
        self.int_t = self.catalog.describe(int)
        self.list_t = self.catalog.describe(list)

    def invoke(self, name, args, **kwargs):
        return invoke_generic(
            Collector(), name, args, catalog=self.catalog, **kwargs
        )

    def method(self, name):
        return [
            m
            for m in self.catalog.describe(Collector).methods
            if m.name == name
        ]

    def test_element_types(self) -> None:
        self.assertEqual(
            infer_element_types(
                [1, [2, 3], (4,), [], [1, "a"], Ref("x")], self.catalog
            ),
            [
                None,
                self.int_t,
                self.int_t,
                None,
                self.catalog.describe(object),
                self.catalog.describe(str),
            ],
        )
        self.assertEqual(
            explicit_element_type(list[int], self.catalog), self.int_t
        )
        self.assertEqual(
            explicit_element_type(Ref[int], self.catalog), self.int_t
        )
        self.assertEqual(
            explicit_element_type(
                self.catalog.describe(Ref[int]), self.catalog
            ),
            self.int_t,
        )
        self.assertIsNone(explicit_element_type(int, self.catalog))

    def test_array_beside_a_slot(self) -> None:
        self.assertEqual(self.invoke("put", [1, [2, 3]]), "1:5")
        self.assertEqual(self.invoke("put", ["a", (2, 3)]), "'a':5")
        self.assertEqual(self.invoke("put", [1, []]), "1:0")
        with self.assertRaises(GenericInferenceError):
            self.invoke("put", [1, ["x"]])
        with self.assertRaises(GenericInferenceError):
            self.invoke("put", [1, 5])

    def test_ref_beside_a_slot(self) -> None:
        cell = Ref(5)
        self.assertEqual(self.invoke("bump", ["v", cell]), "v")
        self.assertEqual(cell.value, 6)
        # a plain value is boxed for the callee
        self.assertEqual(self.invoke("bump", ["v", 5]), "v")
        with self.assertRaises(GenericInferenceError):
            self.invoke("bump", ["v", Ref("x")])

    def test_array_slot_infers_element_type(self) -> None:
        (first,) = self.method("first")
        closed = resolve_generic([first], [self.list_t], [self.int_t])
        self.assertEqual(closed.generic_arguments, (self.int_t,))
        self.assertEqual(
            render_signature(closed, SignatureStyle.Simple),
            "first(items: list[int]) -> int",
        )
        self.assertIsNone(infer_generic_arguments(first, [self.list_t]))
        self.assertEqual(self.invoke("first", [[3, 4]]), 3)
        with self.assertRaises(GenericInferenceError):
            self.invoke("first", [[]])

    def test_ref_slot_infers_cell_type(self) -> None:
        cell = Ref(0)
        self.assertIsNone(self.invoke("store", [cell, 9]))
        self.assertEqual(cell.value, 9)
        with self.assertRaises(GenericInferenceError):
            self.invoke("store", [Ref(0), "x"])

    def test_variadic_slot(self) -> None:
        self.assertEqual(self.invoke("count", [[1, 2, 3]]), 3)
        self.assertEqual(self.invoke("count", [4]), 1)

    def test_explicit_container_types(self) -> None:
        self.assertIs(
            self.invoke("first", [[True]], explicit_param_types=[list[int]]),
            True,
        )
        cell = Ref(1)
        self.assertEqual(
            self.invoke(
                "bump", [2, cell], explicit_param_types=[int, Ref[int]]
            ),
            2,
        )
        self.assertEqual(cell.value, 2)


if __name__ == "__main__":
    unittest.main()
