"""Tests for sonarqube_mcp/serverapi/url.py"""

from sonarqube_mcp.serverapi.url import UrlBuilder, encode, form_body


# ---------------------------------------------------------------------------
# UrlBuilder
# ---------------------------------------------------------------------------

def test_skips_absent_values_and_joins_lists_before_encoding():
    url = UrlBuilder("/x").add_param("a", None).add_param("b", "1").add_param("c", ["x", "y"]).build()
    assert url == "/x?b=1&c=x%2Cy"


def test_no_parameters_leaves_path_untouched():
    assert UrlBuilder("/api/qualitygates/list").add_param("organization", None).build() == "/api/qualitygates/list"


def test_empty_list_and_empty_string_are_skipped():
    url = UrlBuilder("/x").add_param("projects", []).add_param("q", "").add_param("p", 2).build()
    assert url == "/x?p=2"


def test_preserves_insertion_order():
    url = UrlBuilder("/x").add_param("z", "1").add_param("a", "2").add_param("m", "3").build()
    assert url == "/x?z=1&a=2&m=3"


def test_booleans_render_lowercase():
    url = UrlBuilder("/x").add_param("activation", True).add_param("onlyFavorites", False).build()
    assert url == "/x?activation=true&onlyFavorites=false"


def test_values_are_percent_encoded():
    url = UrlBuilder("/x").add_param("key", "my_project:src/Foo Bar.java").build()
    assert url == "/x?key=my_project%3Asrc%2FFoo+Bar.java"


def test_add_params_accepts_pairs():
    url = UrlBuilder("/x").add_params([("a", "1"), ("b", None), ("c", ["d"])]).build()
    assert url == "/x?a=1&c=d"


# ---------------------------------------------------------------------------
# form bodies
# ---------------------------------------------------------------------------

def test_form_body_skips_none_and_encodes():
    body = form_body([("name", "My hook"), ("url", "https://ci.example.com/hook?x=1"), ("secret", None)])
    assert body == "name=My+hook&url=https%3A%2F%2Fci.example.com%2Fhook%3Fx%3D1"


def test_encode_escapes_commas():
    assert encode("a,b") == "a%2Cb"
