# =============================================================================
# tests/test_file_helper.py - Upload Helper Tests
# =============================================================================
# - stored-name reservation ({ms}-{name}, bumped while taken)
# - save_upload writes distinct files for same-millisecond uploads
# - display-name fallback for names secure_filename empties
# =============================================================================

import io
import os

from werkzeug.datastructures import FileStorage

from marketplace.utils import file_helper
from marketplace.utils.file_helper import (
    reserve_upload_name, save_upload, safe_display_name, stored_name_from_url, public_url,
)


def _freeze_clock(monkeypatch, seconds=1.0):
    monkeypatch.setattr(file_helper.time, 'time', lambda: seconds)


class TestReserveUploadName:

    def test_same_millisecond_names_differ(self, tmp_path, monkeypatch):
        _freeze_clock(monkeypatch)

        # both reservations happen before either upload is written
        first, fd_a = reserve_upload_name(str(tmp_path), 'a.png')
        second, fd_b = reserve_upload_name(str(tmp_path), 'a.png')
        os.close(fd_a)
        os.close(fd_b)

        assert first == '1000-a.png'
        assert second == '1001-a.png'
        assert sorted(os.listdir(tmp_path)) == ['1000-a.png', '1001-a.png']

    def test_skips_names_already_on_disk(self, tmp_path, monkeypatch):
        _freeze_clock(monkeypatch)
        (tmp_path / '1000-a.png').write_bytes(b'old')
        (tmp_path / '1001-a.png').write_bytes(b'old')

        name, fd = reserve_upload_name(str(tmp_path), 'a.png')
        os.close(fd)

        assert name == '1002-a.png'
        assert (tmp_path / '1000-a.png').read_bytes() == b'old'


class TestSaveUpload:

    def test_same_named_uploads_keep_their_bytes(self, app, monkeypatch):
        _freeze_clock(monkeypatch)
        folder = app.config['UPLOAD_FOLDER']

        first = save_upload(FileStorage(io.BytesIO(b'first'), filename='a.png'))
        second = save_upload(FileStorage(io.BytesIO(b'second upload'), filename='a.png'))

        assert first == ('a.png', '1000-a.png', 5)
        assert second == ('a.png', '1001-a.png', 13)
        with open(os.path.join(folder, '1000-a.png'), 'rb') as f:
            assert f.read() == b'first'
        with open(os.path.join(folder, '1001-a.png'), 'rb') as f:
            assert f.read() == b'second upload'

    def test_empty_upload_ignored(self, app):
        assert save_upload(FileStorage(io.BytesIO(b''), filename='')) is None
        assert save_upload(None) is None


def test_safe_display_name_fallback():
    fallback = safe_display_name('模型')
    assert fallback.startswith('file_')
    assert len(fallback) == len('file_') + 8
    assert safe_display_name('my model.zip') == 'my_model.zip'


def test_public_url_round_trip(app):
    assert stored_name_from_url(public_url('1-a.png')) == '1-a.png'
    assert stored_name_from_url('https://cdn.example.com/1-a.png') is None
    assert stored_name_from_url(None) is None
