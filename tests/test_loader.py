from core.ingestion import ScopeLoader


def _touch(path, text="x = 1\n"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def test_load_directory_recursively(tmp_path):
    root = tmp_path.resolve()
    a = _touch(root / "a.py")
    b = _touch(root / "pkg" / "b.py")
    _touch(root / "README.md")
    _touch(root / ".git" / "hook.py")
    _touch(root / "pkg" / "__pycache__" / "b.py")

    files = ScopeLoader().load([str(root)])

    assert sorted(files) == sorted([str(a), str(b)])


def test_explicit_files_are_kept_whatever_the_extension(tmp_path):
    notes = _touch(tmp_path.resolve() / "notes.txt")

    assert ScopeLoader().load([str(notes)]) == [str(notes)]


def test_include_extensions(tmp_path):
    root = tmp_path.resolve()
    _touch(root / "a.py")
    pyi = _touch(root / "a.pyi")

    assert ScopeLoader(include_extensions=[".pyi"]).load([str(root)]) == [str(pyi)]


def test_paths_are_absolute(tmp_path, monkeypatch):
    root = tmp_path.resolve()
    a = _touch(root / "a.py")
    monkeypatch.chdir(root)

    assert ScopeLoader().load(["."]) == [str(a)]


def test_missing_arguments_are_skipped(tmp_path):
    assert ScopeLoader().load([str(tmp_path / "missing")]) == []
