from pyntfs.fs_nodes import FileNode, FolderNode
from pyntfs.fsmanager.alias_index import AliasIndex
from pyntfs.fsmanager.shortname import ShortNameAllocator


def make_folder(*names):
    folder = FolderNode("C:")
    for name in names:
        folder.add_child(FileNode(name))
    return folder


def test_short_names_get_no_alias():
    folder = make_folder("test.txt")
    index = AliasIndex()
    assert index.link(folder, "test.txt") is None
    assert folder.aliases == {}


def test_link_and_resolve():
    folder = make_folder("HelloWorld.txt")
    index = AliasIndex()
    short = index.link(folder, "HelloWorld.txt")
    assert short == "HELLOW~1.TXT"
    assert index.resolve(folder, "hellow~1.txt") == "helloworld.txt"
    assert index.get_short_name(folder, "helloworld.TXT") == "HELLOW~1.TXT"


def test_link_is_idempotent():
    folder = make_folder("HelloWorld.txt")
    index = AliasIndex()
    first = index.link(folder, "HelloWorld.txt")
    assert index.link(folder, "HELLOWORLD.TXT") == first
    assert len(folder.aliases) == 1


def test_colliding_long_names_get_distinct_aliases():
    folder = make_folder("HelloWorld1.txt", "HelloWorld2.txt")
    index = AliasIndex()
    a = index.link(folder, "HelloWorld1.txt")
    b = index.link(folder, "HelloWorld2.txt")
    assert a == "HELLOW~1.TXT"
    assert b == "HELLOW~2.TXT"


def test_alias_never_collides_with_a_real_child():
    folder = make_folder("HELLOW~1.TXT", "HelloWorld.txt")
    index = AliasIndex()
    assert index.link(folder, "HelloWorld.txt") == "HELLOW~2.TXT"


def test_unlink_removes_alias():
    folder = make_folder("HelloWorld.txt")
    index = AliasIndex()
    index.link(folder, "HelloWorld.txt")
    assert index.unlink(folder, "helloworld.txt") == ["hellow~1.txt"]
    assert folder.aliases == {}
    assert index.get_short_name(folder, "HelloWorld.txt") == "HELLOWORLD.TXT"


def test_resolve_ignores_dangling_alias():
    folder = make_folder("HelloWorld.txt")
    index = AliasIndex()
    index.link(folder, "HelloWorld.txt")
    folder.remove_child("helloworld.txt")
    assert index.resolve(folder, "HELLOW~1.TXT") is None


def test_exhaustion_is_recorded_not_raised():
    class Exhausted(ShortNameAllocator):
        def allocate(self, filename, is_taken):
            return None

    folder = make_folder("HelloWorld.txt")
    index = AliasIndex(Exhausted())
    assert index.link(folder, "HelloWorld.txt") is None
    assert index.exhausted == ["C:\\HelloWorld.txt"]
    assert folder.aliases == {}
