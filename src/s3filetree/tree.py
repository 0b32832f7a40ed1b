from s3filetree.interfaces import IS3FileNode
from s3filetree.key import parse_key
from zope.interface import implementer


ROOT_LABEL = "root"


@implementer(IS3FileNode)
class S3FileNode:
    """One directory or file in a tree synthesized from flat S3 keys.

    Children are kept in first-seen order. Only file nodes carry an
    ``object_summary``; a node may end up with both children and a summary
    when a key is also the prefix of another key.
    """

    def __init__(self, label, object_summary=None):
        self.label = label
        self.object_summary = object_summary
        self._children = {}

    def __repr__(self):
        return f"<S3FileNode {self.label!r} children={len(self._children)}>"

    def __len__(self):
        return len(self._children)

    def __iter__(self):
        return iter(list(self._children.values()))

    def __contains__(self, label):
        return label in self._children

    @property
    def nodes(self):
        return list(self._children.values())

    @property
    def is_leaf(self):
        return not self._children

    def get(self, label):
        if label is None:
            raise TypeError("node label must not be None")
        return self._children.get(label)

    def get_or_create(self, label):
        child = self.get(label)
        if child is None:
            # setdefault keeps check-then-insert a single dict operation
            child = self._children.setdefault(label, S3FileNode(label))
        return child

    def find_node(self, label):
        return find_node(self, label)

    def walk(self, _path=()):
        """Yield ``(path, node)`` for every descendant, depth-first."""
        for child in self._children.values():
            path = _path + (child.label,)
            yield path, child
            yield from child.walk(path)

    def to_dict(self):
        return {
            "label": self.label,
            "children": [child.to_dict() for child in self._children.values()],
            "object_summary": (
                self.object_summary.to_dict() if self.object_summary else None
            ),
        }


def build_tree(summaries):
    """Fold object summaries into a tree rooted at a node labelled "root".

    Each summary lands at root / bucket / intermediate path... / file name.
    A repeated key overwrites the summary attached earlier.
    """
    root = S3FileNode(ROOT_LABEL)
    for summary in summaries:
        parsed = parse_key(summary.key)
        parent = root.get_or_create(summary.bucket_name)
        for directory in parsed.intermediate_path:
            parent = parent.get_or_create(directory)
        parent.get_or_create(parsed.file_name).object_summary = summary
    return root


def find_node(root, label):
    """Depth-first search for the first node labelled ``label``.

    A child's subtree is searched before the child's own label is compared,
    but a matching child still wins over a match found below it. The root's
    own label is never compared.
    """
    found = None
    for child in root.nodes:
        if found is not None:
            break
        if not child.is_leaf:
            found = find_node(child, label)
        if child.label == label:
            return child
    return found
