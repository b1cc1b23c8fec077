import pytest


@pytest.fixture(autouse=True)
def isolate_working_directory(tmp_path, monkeypatch):
    """Run every test from an empty temporary directory.

    The configuration loader reads ``shipnotes.json`` from the working
    directory, so a file in the developer's checkout must not leak into the
    tests.
    """
    monkeypatch.chdir(tmp_path)
    yield
