import pytest

from storage.file_storage import FileStorage


def test_pdf_path_is_relative_to_media_root(tmp_path):
    storage = FileStorage(str(tmp_path))
    relative = storage.get_pdf_path("trip")
    assert relative == "albums/trip/exports/album.pdf"
    assert storage.get_absolute_path(relative).parent.is_dir()
    assert storage.get_absolute_path(relative) == (tmp_path / relative).resolve()


@pytest.mark.parametrize("album_id", ["../../escaped", "..", "/tmp/elsewhere", "trip/../../.."])
def test_album_id_cannot_escape_media_root(tmp_path, album_id):
    media = tmp_path / "media"
    storage = FileStorage(str(media))
    with pytest.raises(ValueError):
        storage.get_pdf_path(album_id)
    assert not (tmp_path / "escaped").exists()
    assert not (media / "exports").exists()


def test_absolute_path_rejects_escape(tmp_path):
    storage = FileStorage(str(tmp_path / "media"))
    with pytest.raises(ValueError):
        storage.get_absolute_path("../outside.pdf")
