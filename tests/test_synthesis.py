from __future__ import annotations

from autoheal.healing.document import DocumentTree
from autoheal.healing.synthesis import synthesize_path, xpath_literal
from tests.helpers import LOGIN_PAGE, StaticPage, element_path, lxml_path

CATALOG = """
<html>
  <head><title>Catalog</title></head>
  <body>
    <header><h1>Catalog</h1></header>
    <ul>
      <li><span>One</span></li>
      <li class="featured sale"><span>Two</span></li>
      <li><span>Three</span><em>new</em></li>
    </ul>
    <form>
      <input name="search">
      <input name='o"brien'>
      <button id="go">Go</button>
    </form>
    <div><p>first</p><p>second</p></div>
    <div><p>only</p></div>
  </body>
</html>
"""


def test_login_button_path_through_unique_children():
    tree = DocumentTree.from_markup(LOGIN_PAGE)
    node = tree.by_id("login-btn")
    assert synthesize_path(tree, node) == "/html/body/main/section/div[@id='login-btn']"


def test_step_preference_order():
    tree = DocumentTree.from_markup(CATALOG)
    assert synthesize_path(tree, tree.by_id("go")) == "/html/body/form/button[@id='go']"
    search = tree.with_attribute("name", "search")[0]
    assert synthesize_path(tree, search) == "/html/body/form/input[@name='search']"
    featured = tree.with_class("sale")[0]
    assert synthesize_path(tree, featured) == "/html/body/ul/li[contains(@class,'featured')]"


def test_positions_are_counted_among_same_tag_siblings():
    tree = DocumentTree.from_markup(CATALOG)
    third_item = tree.with_tag("li")[2]
    assert synthesize_path(tree, third_item) == "/html/body/ul/li[3]"
    new_badge = tree.with_tag("em")[0]
    assert synthesize_path(tree, new_badge) == "/html/body/ul/li[3]/em"
    second_paragraph = tree.with_tag("p")[1]
    assert synthesize_path(tree, second_paragraph) == "/html/body/div[1]/p[2]"


def test_root_element_has_no_path():
    tree = DocumentTree.from_markup(CATALOG)
    assert synthesize_path(tree, tree.root) is None


def test_quotes_in_values_stay_valid_xpath():
    assert xpath_literal("plain") == "'plain'"
    assert xpath_literal("it's") == '"it\'s"'
    assert xpath_literal("a'b\"c") == "concat('a', \"'\", 'b\"c')"
    page = StaticPage(CATALOG)
    tree = DocumentTree.from_markup(CATALOG)
    node = tree.with_attribute("name", 'o"brien')[0]
    matches = page.select(synthesize_path(tree, node))
    assert [lxml_path(item) for item in matches] == [element_path(tree, node)]


def test_synthesized_paths_resolve_back_to_their_node():
    page = StaticPage(CATALOG)
    tree = DocumentTree.from_markup(CATALOG)
    for node in tree:
        if node is tree.root:
            continue
        matches = page.select(synthesize_path(tree, node))
        assert [lxml_path(item) for item in matches] == [element_path(tree, node)], node.tag


REPEATED_CLASSES = """
<html>
  <body>
    <ul><li class="item">Alpha</li><li class="item">Beta</li></ul>
    <div class="btn">Cancel</div>
    <div class="btn-primary">Save</div>
    <p id="dup">first</p><p id="dup">second</p>
    <input name="q"><input name="q">
  </body>
</html>
"""


def test_ambiguous_predicates_get_a_position():
    tree = DocumentTree.from_markup(REPEATED_CLASSES)
    beta = tree.with_tag("li")[1]
    assert synthesize_path(tree, beta) == "/html/body/ul/li[contains(@class,'item')][2]"
    save = tree.with_class("btn-primary")[0]
    assert synthesize_path(tree, save) == "/html/body/div[contains(@class,'btn-primary')]"
    cancel = tree.with_class("btn")[0]
    assert synthesize_path(tree, cancel) == "/html/body/div[contains(@class,'btn')][1]"
    second_dup = tree.with_tag("p")[1]
    assert synthesize_path(tree, second_dup) == "/html/body/p[@id='dup'][2]"
    second_input = tree.with_tag("input")[1]
    assert synthesize_path(tree, second_input) == "/html/body/input[@name='q'][2]"


def test_repeated_classes_resolve_back_to_their_node():
    page = StaticPage(REPEATED_CLASSES)
    tree = DocumentTree.from_markup(REPEATED_CLASSES)
    for node in tree:
        if node is tree.root:
            continue
        matches = page.select(synthesize_path(tree, node))
        assert lxml_path(matches[0]) == element_path(tree, node), node.tag
