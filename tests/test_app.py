import io
import os
import shutil
import tempfile
import unittest

from openpyxl import Workbook, load_workbook

from app import create_app, get_registry
from config import TestConfig

def make_upload(values, name='codes.xlsx'):
    wb = Workbook()
    ws = wb.active
    for value in values:
        ws.append([value])
    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return (buf, name)

class TestRoutes(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.flask_app = create_app(TestConfig)
        self.flask_app.config['BARCODE_DIR'] = os.path.join(self.tmp, 'barcodes')
        self.flask_app.config['EXPORT_DIR'] = os.path.join(self.tmp, 'public')
        self.app = self.flask_app.test_client()
        self.ctx = self.flask_app.app_context()
        self.ctx.push()
        self.registry = get_registry()

    def tearDown(self):
        self.ctx.pop()
        shutil.rmtree(self.tmp, ignore_errors=True)

    def import_codes(self, values, fmt='code128'):
        return self.app.post('/import', data={
            'format': fmt,
            'file': make_upload(values),
        }, content_type='multipart/form-data')

    def test_home_shows_banner_without_status(self):
        response = self.app.get('/')
        self.assertEqual(response.status_code, 200)
        self.assertIn('verifique o tipo de arquivo', response.get_data(as_text=True))

        response = self.app.get('/?importStatus=success')
        self.assertNotIn('verifique o tipo de arquivo', response.get_data(as_text=True))

    def test_home_shows_logo(self):
        page = self.app.get('/').get_data(as_text=True)
        self.assertIn('src="/logo.svg"', page)

        logo = self.app.get('/logo.svg')
        self.assertEqual(logo.status_code, 200)
        self.assertEqual(logo.mimetype, 'image/svg+xml')
        logo.close()

    def test_import_redirects_and_lists_images(self):
        response = self.import_codes([100, 'abc', 200])
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response.headers['Location'].endswith('/?importStatus=success'))
        self.assertEqual(self.registry.codes('code128'), [100, 200])

        page = self.app.get('/?importStatus=success').get_data(as_text=True)
        self.assertIn('/barcodes/barcode_code128_100.png', page)
        self.assertIn('/barcodes/barcode_code128_200.png', page)
        self.assertIn('2 código(s) Code128 importado(s).', page)

        image = self.app.get('/barcodes/barcode_code128_100.png')
        self.assertEqual(image.status_code, 200)
        self.assertEqual(image.mimetype, 'image/png')
        image.close()

    def test_import_padded_links(self):
        self.import_codes([42], fmt='ean14')
        page = self.app.get('/?importStatus=success').get_data(as_text=True)
        self.assertIn('barcode_ean14_00000000000042.png', page)

    def test_import_rejects_bad_requests(self):
        response = self.import_codes([1], fmt='xyz')
        self.assertEqual(response.status_code, 400)

        response = self.app.post('/import', data={'format': 'code128'},
                                 content_type='multipart/form-data')
        self.assertEqual(response.status_code, 400)

        response = self.app.post('/import', data={
            'format': 'code128',
            'file': (io.BytesIO(b''), 'empty.xlsx'),
        }, content_type='multipart/form-data')
        self.assertEqual(response.status_code, 400)

        self.assertEqual(self.registry.counts(), {'code128': 0, 'ean13': 0, 'ean14': 0})

    def test_import_unreadable_file(self):
        response = self.app.post('/import', data={
            'format': 'code128',
            'file': (io.BytesIO(b'not a spreadsheet'), 'codes.xlsx'),
        }, content_type='multipart/form-data')
        self.assertEqual(response.status_code, 500)
        self.assertEqual(self.registry.codes('code128'), [])

    def test_export_round_trip(self):
        self.import_codes([123, 456])
        response = self.app.get('/export?format=code128')
        self.assertEqual(response.status_code, 200)
        self.assertIn('dados_code128.xlsx', response.headers['Content-Disposition'])

        ws = load_workbook(io.BytesIO(response.data)).active
        rows = list(ws.iter_rows(values_only=True))
        self.assertEqual([r[0] for r in rows[1:]], ['123', '456'])
        response.close()

    def test_export_both(self):
        self.import_codes([1], fmt='ean14')
        self.import_codes([2], fmt='code128')
        response = self.app.get('/export?format=both')
        self.assertEqual(response.status_code, 200)
        self.assertIn('dados_both.xlsx', response.headers['Content-Disposition'])

        ws = load_workbook(io.BytesIO(response.data)).active
        self.assertEqual([r[0] for r in ws.iter_rows(min_row=2, values_only=True)], ['2', '1'])
        response.close()

    def test_export_invalid_format(self):
        self.import_codes([1])
        self.assertEqual(self.app.get('/export?format=xyz').status_code, 400)
        self.assertEqual(self.app.get('/export').status_code, 400)
        self.assertEqual(self.registry.codes('code128'), [1])

    def test_clear(self):
        self.import_codes([1, 2])
        for _ in range(2):
            response = self.app.post('/clear', data={'format': 'code128'})
            self.assertEqual(response.status_code, 302)
            self.assertTrue(response.headers['Location'].endswith('/?clearStatus=success'))
            self.assertEqual(self.registry.codes('code128'), [])
        self.assertEqual(os.listdir(self.flask_app.config['BARCODE_DIR']), [])

    def test_clear_invalid_format(self):
        self.import_codes([1])
        response = self.app.post('/clear', data={'format': 'xyz'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(self.registry.codes('code128'), [1])

if __name__ == '__main__':
    unittest.main()
