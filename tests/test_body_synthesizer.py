import random

from api_request_sampler.cache import ClassDefinitionCache
from api_request_sampler.generator.body import FILE_PLACEHOLDER, RequestBodySynthesizer
from api_request_sampler.generator.values import SAMPLE_EMAIL, SampleValueProvider
from api_request_sampler.parser.base import (
    EnumProperty,
    FieldProperty,
    ParameterDescriptor,
    ParameterSource,
)


def _body(type_name, properties=None, name="dto"):
    return ParameterDescriptor(name=name, type=type_name, source=ParameterSource.BODY, properties=properties)


def _synth(**kwargs):
    return RequestBodySynthesizer(provider=SampleValueProvider(rng=random.Random(1)), **kwargs)


class TestDispatch:
    def test_no_parameters(self):
        result = _synth().synthesize([])
        assert result.body is None
        assert result.errors == []

    def test_enum_body_is_bare_first_value(self):
        param = _body("Color", [EnumProperty(name="_enum", type="Color", values=["A", "B", "C"])])
        result = _synth().synthesize([param])
        assert result.body == "A"
        assert result.errors == []

    def test_multiple_body_parameters_flat_object(self):
        params = [_body("string", name="email"), _body("int", name="quantity")]
        result = _synth().synthesize(params)
        assert result.body == {"email": SAMPLE_EMAIL, "quantity": 1}
        assert result.errors == []

    def test_form_parameters_fallback(self):
        params = [ParameterDescriptor(name="title", type="string", source=ParameterSource.FORM)]
        result = _synth().synthesize(params)
        assert result.body == {"title": "Sample Name"}

    def test_query_only_is_empty(self):
        params = [ParameterDescriptor(name="page", type="int", source=ParameterSource.QUERY)]
        result = _synth().synthesize(params)
        assert result.body is None
        assert result.errors == []


class TestUnresolvedBody:
    def test_not_found_warning(self):
        result = _synth().synthesize([_body("OrderDto")])
        assert result.body is None
        assert len(result.errors) == 1
        warning = result.errors[0]
        assert warning.is_global
        assert "OrderDto" in warning.message
        assert "not found in workspace" in warning.message

    def test_preview_suppresses_warning(self):
        result = _synth().synthesize([_body("OrderDto", [])], suppress_unresolved_warnings=True)
        assert result.body is None
        assert result.errors == []

    def test_cached_errors_are_translated(self):
        cache = ClassDefinitionCache()
        cache.put("OrderDto", [], None, "/Order.cs", errors=[
            "Class 'OrderDto' not found in workspace",
            "Unbalanced braces in OrderDto",
        ])
        result = _synth(cache=cache).synthesize([_body("OrderDto")], suppress_unresolved_warnings=True)
        assert result.body is None
        assert [w.message for w in result.errors] == [
            "Class 'OrderDto' not found in workspace",
            "Unbalanced braces in OrderDto",
        ]
        assert all(w.field is None for w in result.errors)
        assert "Define this type" in result.errors[0].remediation
        assert result.errors[1].remediation == "Check the type definition"


class TestObjectSynthesis:
    def test_simple_fields(self):
        param = _body("UserDto", [
            FieldProperty(name="email", type="string"),
            FieldProperty(name="age", type="int"),
            FieldProperty(name="active", type="bool"),
        ])
        result = _synth().synthesize([param])
        assert result.body == {"email": SAMPLE_EMAIL, "age": 42, "active": True}
        assert result.errors == []

    def test_unresolved_complex_field(self):
        param = _body("UserDto", [FieldProperty(name="manager", type="ManagerDto")])
        result = _synth().synthesize([param])
        assert result.body == {"manager": None}
        assert len(result.errors) == 1
        assert result.errors[0].field == "manager"
        assert "ManagerDto" in result.errors[0].message

    def test_list_with_nested_tree(self):
        param = _body("OrderDto", [
            FieldProperty(name="lines", type="List<OrderLine>", properties=[
                FieldProperty(name="sku", type="string"),
                FieldProperty(name="quantity", type="int"),
            ]),
        ])
        result = _synth().synthesize([param])
        assert result.body == {"lines": [{"sku": "sample_string", "quantity": 1}]}
        assert result.errors == []

    def test_list_of_unresolved_complex(self):
        param = _body("OrderDto", [FieldProperty(name="lines", type="IEnumerable<OrderLine>")])
        result = _synth().synthesize([param])
        assert result.body == {"lines": []}
        assert len(result.errors) == 1
        assert result.errors[0].field == "lines"
        assert "OrderLine" in result.errors[0].message

    def test_list_of_simple(self):
        param = _body("TagDto", [
            FieldProperty(name="tags", type="List<string>"),
            FieldProperty(name="scores", type="double[]"),
        ])
        result = _synth().synthesize([param])
        assert result.body == {"tags": ["sample_string"], "scores": [3.14]}

    def test_nested_object(self):
        param = _body("UserDto", [
            FieldProperty(name="home", type="AddressDto?", properties=[
                FieldProperty(name="city", type="string"),
            ]),
        ])
        result = _synth().synthesize([param])
        assert result.body == {"home": {"city": "New York"}}

    def test_enum_property_takes_first_value(self):
        param = _body("UserDto", [
            FieldProperty(name="email", type="string"),
            EnumProperty(name="role", type="Role", values=["Admin", "Member"]),
        ])
        result = _synth().synthesize([param])
        assert result.body["role"] == "Admin"

    def test_file_property_placeholder(self):
        param = _body("UploadDto", [FieldProperty(name="attachment", type="IFormFile")])
        result = _synth().synthesize([param])
        assert result.body == {"attachment": FILE_PLACEHOLDER}
        assert result.errors == []

    def test_siblings_survive_nested_warnings(self):
        param = _body("UserDto", [
            FieldProperty(name="home", type="AddressDto", properties=[
                FieldProperty(name="geo", type="GeoPoint"),
                FieldProperty(name="city", type="string"),
            ]),
            FieldProperty(name="email", type="string"),
        ])
        result = _synth().synthesize([param])
        assert result.body == {"home": {"geo": None, "city": "New York"}, "email": SAMPLE_EMAIL}
        assert [w.field for w in result.errors] == ["geo"]

    def test_base_class_warning_comes_first(self):
        param = _body("AdminDto", [
            FieldProperty(name="level", type="Widget", base_class_warning="base class 'UserDto' was not found"),
        ])
        result = _synth().synthesize([param])
        assert len(result.errors) == 2
        assert result.errors[0].is_global
        assert "AdminDto" in result.errors[0].message
        assert result.errors[1].field == "level"


class TestRecursionGuard:
    def test_self_referential_tree_terminates(self):
        node = FieldProperty(name="parent", type="Category", properties=[])
        node.properties.append(node)
        param = _body("Category", [node])

        result = _synth().synthesize([param])
        assert result.body == {"parent": {"parent": None}}
        assert len(result.errors) == 1
        assert result.errors[0].field == "parent"

    def test_self_referential_collection_terminates(self):
        node = FieldProperty(name="children", type="List<Category>", properties=[])
        node.properties.append(node)
        result = _synth().synthesize([_body("Category", [node])])
        assert result.body == {"children": [{"children": []}]}
        assert len(result.errors) == 1

    def test_max_depth(self):
        leaf = FieldProperty(name="c", type="C", properties=[FieldProperty(name="value", type="int")])
        mid = FieldProperty(name="b", type="B", properties=[leaf])
        top = FieldProperty(name="a", type="A", properties=[mid])

        result = _synth(max_depth=2).synthesize([_body("Root", [top])])
        assert result.body == {"a": {"b": {"c": None}}}
        assert [w.field for w in result.errors] == ["c"]
