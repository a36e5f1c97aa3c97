from stkdv.tree import Node


def test_node_without_children_is_leaf():
    assert Node(ids=[1, 2, 3]).is_leaf() is True


def test_node_with_children_is_not_leaf():
    parent = Node(ids=[1, 2], children=[Node(ids=[1]), Node(ids=[2])])
    assert parent.is_leaf() is False


def test_subtree_ids_returns_all_ids():
    parent = Node(ids=[4, 5, 6], children=[Node(ids=[4]), Node(ids=[5, 6])])
    assert parent.subtree_ids() == [4, 5, 6]


def test_subtree_ids_is_a_copy():
    node = Node(ids=[7, 8])
    reported = node.subtree_ids()
    reported.append(9)
    assert node.ids == [7, 8]


def test_default_nodes_do_not_share_lists():
    first = Node()
    second = Node()
    first.ids.append(1)
    first.children.append(Node())
    assert second.ids == []
    assert second.is_leaf() is True