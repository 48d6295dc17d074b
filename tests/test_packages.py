from bs4 import BeautifulSoup

from ghnet.application.packages import extract_packages
from ghnet.domain.entities import PackageRef

from conftest import read_fixture


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def test_single_menu_item():
    html = (
        '<a class="select-menu-item" href="https://github.com/acme/widgets/packages/123?package_id=ABC">'
        "<span>lib:core</span></a>"
    )
    assert extract_packages(_soup(html)) == {PackageRef("ABC", "lib:core")}


def test_dependents_page_menu():
    packages = extract_packages(_soup(read_fixture("dependents_page1.html")))

    assert sorted(packages) == [
        PackageRef("UGFja2FnZS0xODAwNDIzMjY=", "com.acme:widgets-core"),
        PackageRef("UGFja2FnZS0yNTUyODg0ODQ=", "com.acme:widgets-json"),
    ]


def test_page_without_menu_items_gives_empty_set():
    assert extract_packages(_soup(read_fixture("dependents_page2.html"))) == set()


def test_items_without_label_are_skipped():
    html = (
        '<a class="select-menu-item" href="/x?package_id=ONE"></a>'
        '<a class="select-menu-item" href="/x?package_id=TWO"><span> </span></a>'
        '<a class="select-menu-item" href="/x?package_id=THREE"><span>three</span></a>'
    )
    assert extract_packages(_soup(html)) == {PackageRef("THREE", "three")}


def test_duplicate_items_collapse():
    item = '<a class="select-menu-item" href="/x?package_id=ABC"><span>lib:core</span></a>'
    assert len(extract_packages(_soup(item * 3))) == 1


def test_package_ref_orders_by_name_and_compares_by_id_and_name():
    a = PackageRef("2", "alpha")
    b = PackageRef("1", "beta")

    assert sorted([b, a]) == [a, b]
    assert PackageRef("1", "alpha") != a
    assert PackageRef("2", "alpha") == a
    assert hash(PackageRef("2", "alpha")) == hash(a)
