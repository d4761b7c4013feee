"""Tests for wren.expander — RFC 6570 expansion, levels 1 to 4."""

from enum import Enum
from typing import Any

import pytest

from wren import TemplateConfig, parse, render
from wren.expander import render_expression
from wren.template.model import Expression, Operator, VarSpec

# RFC 6570 section 3.2 variables
RFC_VALUES: dict[str, Any] = {
    "count": ["one", "two", "three"],
    "dom": ["example", "com"],
    "dub": "me/too",
    "hello": "Hello World!",
    "half": "50%",
    "var": "value",
    "who": "fred",
    "base": "http://example.com/home/",
    "path": "/foo/bar",
    "list": ["red", "green", "blue"],
    "keys": [("semi", ";"), ("dot", "."), ("comma", ",")],
    "v": "6",
    "x": "1024",
    "y": "768",
    "empty": "",
    "empty_keys": {},
    "undef": None,
    "year": ["1965", "2000", "2012"],
    "semi": ";",
}

RFC_EXAMPLES = [
    # 2.4.1 Prefix values
    ("{var:20}", "value"),
    ("{semi}", "%3B"),
    ("{semi:2}", "%3B"),
    # 2.4.2 Explode
    ("find{?year*}", "find?year=1965&year=2000&year=2012"),
    ("www{.dom*}", "www.example.com"),
    # 3.2.1 Variable expansion
    ("{count}", "one,two,three"),
    ("{count*}", "one,two,three"),
    ("{/count}", "/one,two,three"),
    ("{/count*}", "/one/two/three"),
    ("{;count}", ";count=one,two,three"),
    ("{;count*}", ";count=one;count=two;count=three"),
    ("{?count}", "?count=one,two,three"),
    ("{?count*}", "?count=one&count=two&count=three"),
    ("{&count*}", "&count=one&count=two&count=three"),
    # 3.2.2 Simple string expansion
    ("{var}", "value"),
    ("{hello}", "Hello%20World%21"),
    ("{half}", "50%25"),
    ("O{empty}X", "OX"),
    ("O{undef}X", "OX"),
    ("{x,y}", "1024,768"),
    ("{x,hello,y}", "1024,Hello%20World%21,768"),
    ("?{x,empty}", "?1024,"),
    ("?{x,undef}", "?1024"),
    ("?{undef,y}", "?768"),
    ("{var:3}", "val"),
    ("{var:30}", "value"),
    ("{list}", "red,green,blue"),
    ("{list*}", "red,green,blue"),
    ("{keys}", "semi,%3B,dot,.,comma,%2C"),
    ("{keys*}", "semi=%3B,dot=.,comma=%2C"),
    # 3.2.3 Reserved expansion
    ("{+var}", "value"),
    ("{+hello}", "Hello%20World!"),
    ("{+half}", "50%25"),
    ("{base}index", "http%3A%2F%2Fexample.com%2Fhome%2Findex"),
    ("{+base}index", "http://example.com/home/index"),
    ("O{+empty}X", "OX"),
    ("O{+undef}X", "OX"),
    ("{+path}/here", "/foo/bar/here"),
    ("here?ref={+path}", "here?ref=/foo/bar"),
    ("up{+path}{var}/here", "up/foo/barvalue/here"),
    ("{+x,hello,y}", "1024,Hello%20World!,768"),
    ("{+path,x}/here", "/foo/bar,1024/here"),
    ("{+path:6}/here", "/foo/b/here"),
    ("{+list}", "red,green,blue"),
    ("{+list*}", "red,green,blue"),
    ("{+keys}", "semi,;,dot,.,comma,,"),
    ("{+keys*}", "semi=;,dot=.,comma=,"),
    # 3.2.4 Fragment expansion
    ("{#var}", "#value"),
    ("{#hello}", "#Hello%20World!"),
    ("{#half}", "#50%25"),
    ("foo{#empty}", "foo#"),
    ("foo{#undef}", "foo"),
    ("{#x,hello,y}", "#1024,Hello%20World!,768"),
    ("{#path,x}/here", "#/foo/bar,1024/here"),
    ("{#path:6}/here", "#/foo/b/here"),
    ("{#list}", "#red,green,blue"),
    ("{#list*}", "#red,green,blue"),
    ("{#keys}", "#semi,;,dot,.,comma,,"),
    ("{#keys*}", "#semi=;,dot=.,comma=,"),
    # 3.2.5 Label expansion
    ("{.who}", ".fred"),
    ("{.who,who}", ".fred.fred"),
    ("{.half,who}", ".50%25.fred"),
    ("X{.var}", "X.value"),
    ("X{.empty}", "X."),
    ("X{.undef}", "X"),
    ("X{.var:3}", "X.val"),
    ("X{.list}", "X.red,green,blue"),
    ("X{.list*}", "X.red.green.blue"),
    ("X{.keys}", "X.semi,%3B,dot,.,comma,%2C"),
    ("X{.keys*}", "X.semi=%3B.dot=..comma=%2C"),
    ("X{.empty_keys}", "X"),
    ("X{.empty_keys*}", "X"),
    # 3.2.6 Path segment expansion
    ("{/who}", "/fred"),
    ("{/who,who}", "/fred/fred"),
    ("{/half,who}", "/50%25/fred"),
    ("{/who,dub}", "/fred/me%2Ftoo"),
    ("{/var}", "/value"),
    ("{/var,empty}", "/value/"),
    ("{/var,undef}", "/value"),
    ("{/var,x}/here", "/value/1024/here"),
    ("{/var:1,var}", "/v/value"),
    ("{/list}", "/red,green,blue"),
    ("{/list*}", "/red/green/blue"),
    ("{/list*,path:4}", "/red/green/blue/%2Ffoo"),
    ("{/keys}", "/semi,%3B,dot,.,comma,%2C"),
    ("{/keys*}", "/semi=%3B/dot=./comma=%2C"),
    # 3.2.7 Path-style parameter expansion
    ("{;who}", ";who=fred"),
    ("{;half}", ";half=50%25"),
    ("{;empty}", ";empty"),
    ("{;v,empty,who}", ";v=6;empty;who=fred"),
    ("{;v,bar,who}", ";v=6;who=fred"),
    ("{;x,y}", ";x=1024;y=768"),
    ("{;x,y,empty}", ";x=1024;y=768;empty"),
    ("{;x,y,undef}", ";x=1024;y=768"),
    ("{;hello:5}", ";hello=Hello"),
    ("{;list}", ";list=red,green,blue"),
    ("{;list*}", ";list=red;list=green;list=blue"),
    ("{;keys}", ";keys=semi,%3B,dot,.,comma,%2C"),
    ("{;keys*}", ";semi=%3B;dot=.;comma=%2C"),
    # 3.2.8 Form-style query expansion
    ("{?who}", "?who=fred"),
    ("{?half}", "?half=50%25"),
    ("{?x,y}", "?x=1024&y=768"),
    ("{?x,y,empty}", "?x=1024&y=768&empty="),
    ("{?x,y,undef}", "?x=1024&y=768"),
    ("{?var:3}", "?var=val"),
    ("{?list}", "?list=red,green,blue"),
    ("{?list*}", "?list=red&list=green&list=blue"),
    ("{?keys}", "?keys=semi,%3B,dot,.,comma,%2C"),
    ("{?keys*}", "?semi=%3B&dot=.&comma=%2C"),
    # 3.2.9 Form-style query continuation
    ("{&who}", "&who=fred"),
    ("{&half}", "&half=50%25"),
    ("?fixed=yes{&x}", "?fixed=yes&x=1024"),
    ("{&x,y,empty}", "&x=1024&y=768&empty="),
    ("{&x,y,undef}", "&x=1024&y=768"),
    ("{&var:3}", "&var=val"),
    ("{&list}", "&list=red,green,blue"),
    ("{&list*}", "&list=red&list=green&list=blue"),
    ("{&keys}", "&keys=semi,%3B,dot,.,comma,%2C"),
    ("{&keys*}", "&semi=%3B&dot=.&comma=%2C"),
]


@pytest.mark.parametrize(("text", "expected"), RFC_EXAMPLES)
def test_rfc_examples(text: str, expected: str) -> None:
    assert render(parse(text), RFC_VALUES) == expected


class Kind(Enum):
    USER = "user"


class TestRender:
    def test_keyword_arguments(self) -> None:
        assert render(parse("/users/{id}"), id="42") == "/users/42"

    def test_keyword_arguments_win(self) -> None:
        assert render(parse("{a}"), {"a": "1"}, a="2") == "2"

    def test_non_string_keys(self) -> None:
        assert render(parse("/{user}"), {Kind.USER: "bob"}) == "/bob"

    def test_numbers_and_booleans(self) -> None:
        assert render(parse("/t/{num}/{bool}"), {"num": 0, "bool": False}) == "/t/0/false"

    def test_enum_value(self) -> None:
        assert render(parse("{kind}"), kind=Kind.USER) == "user"

    def test_idempotent(self) -> None:
        template = parse("{?q,tags*}")
        values = {"q": "a b", "tags": ["x", "y"]}
        assert render(template, values) == render(template, values)

    def test_missing_values(self) -> None:
        assert render(parse("/users{/id}")) == "/users"

    def test_empty_string_between_literals(self) -> None:
        assert render(parse("/a{empty}b"), empty="") == "/ab"

    def test_empty_list_omits_expression(self) -> None:
        assert render(parse("/s{?list*}"), list=[]) == "/s"

    def test_empty_map_omits_expression(self) -> None:
        assert render(parse("/p{;map*}"), map={}) == "/p"

    def test_undefined_list_members_dropped(self) -> None:
        assert render(parse("{/list*}"), list=["a", None, "b"]) == "/a/b"


class TestLiterals:
    def test_unicode_literal_verbatim(self) -> None:
        assert render(parse("/héé{/x,y}"), x=1, y=2) == "/héé/1/2"

    def test_iprivate_literal_verbatim(self) -> None:
        text = "/h" + chr(0x10FFFD) * 2 + "{/x,y}"
        assert render(parse(text), x=1, y=2) == "/h" + chr(0x10FFFD) * 2 + "/1/2"

    def test_percent_encoded_literal_verbatim(self) -> None:
        assert render(parse("/h%20%20{/x,y}"), x=1, y=2) == "/h%20%20/1/2"


class TestOperators:
    def test_reserved_keeps_reserved_characters(self) -> None:
        assert render(parse("/x/{+var}"), var="a/b?c=d&x=y") == "/x/a/b?c=d&x=y"

    def test_simple_escapes_reserved_characters(self) -> None:
        assert render(parse("/x/{var}"), var="a/b?c=d&x=y") == "/x/a%2Fb%3Fc%3Dd%26x%3Dy"

    def test_reserved_encodes_non_ascii(self) -> None:
        assert (
            render(parse("/u/{+term}"), term="東京/渋谷")
            == "/u/%E6%9D%B1%E4%BA%AC/%E6%B8%8B%E8%B0%B7"
        )

    def test_fragment_encodes_non_ascii(self) -> None:
        assert render(parse("/p{#frag}"), frag="café") == "/p#caf%C3%A9"

    def test_fragment_prefix_counts_characters(self) -> None:
        assert render(parse("{#frag:6}"), frag="café-bar") == "#caf%C3%A9-b"

    def test_label_encodes_spaces(self) -> None:
        assert render(parse("/d{.label}"), label="has dots") == "/d.has%20dots"

    def test_path_without_explode_encodes_slashes(self) -> None:
        assert render(parse("/files{/path}"), path="a/b/c") == "/files/a%2Fb%2Fc"

    def test_reserved_prefix(self) -> None:
        assert render(parse("/base{+path:5}"), path="/a/b/c") == "/base/a/b/"

    def test_path_param_empty(self) -> None:
        assert render(parse("/users{;id}"), id="") == "/users;id"

    def test_query_empty(self) -> None:
        assert render(parse("{?x}"), x="") == "?x="

    def test_query_emoji(self) -> None:
        assert render(parse("{?emoji}"), emoji="🙂") == "?emoji=%F0%9F%99%82"

    def test_query_continuation(self) -> None:
        assert render(parse("?fixed=1{&x,y}"), x="2", y="3") == "?fixed=1&x=2&y=3"

    def test_mixed_expressions(self) -> None:
        template = parse("https://ex.com{/ver}{/res*}{?q,lang}{&page}")
        values = {"ver": "v1", "res": ["users", "42"], "q": "café", "lang": "fr", "page": "2"}
        assert render(template, values) == "https://ex.com/v1/users/42?q=caf%C3%A9&lang=fr&page=2"

    def test_exploding_scalars(self) -> None:
        template = parse("/{int*}/{str*}{/null*}{?int*}{&str*}{&null*}")
        assert render(template, int=1, str="hello", null=None) == "/1/hello?int=1&str=hello"


class TestAssociativeArrays:
    @pytest.mark.parametrize(
        "value",
        [
            [("a", "1"), ("b", "2")],
            [("a", 1), ("b", 2)],
            {"a": 1, "b": 2},
        ],
    )
    def test_exploded(self, value: object) -> None:
        assert render(parse("{foo*}"), foo=value) == "a=1,b=2"

    @pytest.mark.parametrize(
        "value",
        [
            [("a", "1"), ("b", "2")],
            {"a": 1, "b": 2},
        ],
    )
    def test_not_exploded(self, value: object) -> None:
        assert render(parse("{foo}"), foo=value) == "a,1,b,2"

    def test_exploded_query_map(self) -> None:
        assert render(parse("/m{?map*}"), map={"a": "1", "b": "2"}) == "/m?a=1&b=2"

    def test_keyword_lists_disabled(self) -> None:
        template = parse("{foo*}", TemplateConfig(keyword_lists=False))
        assert render(template, foo=[("a", "1"), ("b", "2")]) == "a,1,b,2"

    def test_keys_use_operator_escaping(self) -> None:
        assert render(parse("{?map*}"), map={"a b": "c"}) == "?a%20b=c"

    def test_nested_list_leaves_encoded_separately(self) -> None:
        assert render(parse("{?list}"), list=[["a b", "c"], "d"]) == "?list=a%20b,c,d"

    def test_nested_map_members_encoded_separately(self) -> None:
        assert render(parse("{map*}"), map={"k": ["x y", "z"]}) == "k=x%20y,z"
        assert render(parse("{+map}"), map={"k": [("p/q", "r s")]}) == "k,p/q,r%20s"


class TestRenderExpression:
    def test_all_undefined_renders_nothing(self) -> None:
        expression = Expression(Operator.QUERY, (VarSpec("a"), VarSpec("b")))
        assert render_expression(expression, {}) == ""

    def test_prefix_emitted_once(self) -> None:
        expression = Expression(Operator.LABEL, (VarSpec("a"), VarSpec("b")))
        assert render_expression(expression, {"a": "x", "b": "y"}) == ".x.y"
