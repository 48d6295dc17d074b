from urllib.parse import parse_qs, urlsplit

import pytest

from ghnet.application.urls import PageKind, build_url
from ghnet.domain.errors import MalformedUrl


def test_dependents_url_without_package():
    assert build_url("https://github.com/acme/widgets") == "https://github.com/acme/widgets/network/dependents"


def test_trailing_slash_is_ignored():
    assert build_url("https://github.com/acme/widgets/") == "https://github.com/acme/widgets/network/dependents"


def test_packages_page_url():
    assert build_url("https://github.com/acme/widgets", PageKind.PACKAGES) == "https://github.com/acme/widgets/packages"


def test_package_id_is_form_encoded():
    url = build_url("https://github.com/acme/widgets", package_id="UGFja2FnZS0xODAwNDIzMjY=")
    assert url == "https://github.com/acme/widgets/network/dependents?package_id=UGFja2FnZS0xODAwNDIzMjY%3D"


@pytest.mark.parametrize("package_id", ["ABC", "UGFja2FnZS0yNTUyODg0ODc=", "a b&c=d/e+f", "é:ü"])
def test_package_id_decodes_back_to_itself(package_id):
    url = build_url("https://github.com/acme/widgets", package_id=package_id)
    assert parse_qs(urlsplit(url).query)["package_id"] == [package_id]


@pytest.mark.parametrize("base", ["", "not a url", "ftp://github.com/acme/widgets", "https://"])
def test_malformed_base_url(base):
    with pytest.raises(MalformedUrl):
        build_url(base)
