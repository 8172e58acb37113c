import logging

from flask import (
    Blueprint, Flask, current_app, flash, redirect, render_template, request,
    send_file, send_from_directory, url_for
)

from config import Config
from models import FORMATS, FORMAT_LABELS, CodeRegistry, is_valid_format
from services.barcodes import barcode_filename, build_payload
from services.cleanup import clear_codes
from services.errors import ClientInputError
from services.exports import export_codes, export_filename, select_entries
from services.imports import import_codes

logger = logging.getLogger(__name__)

bp = Blueprint('barcodes', __name__)

def get_registry():
    return current_app.extensions['code_registry']

# --- Routes ---

@bp.route('/')
def index():
    registry = get_registry()
    columns = []
    for fmt in FORMATS:
        images = []
        for code in registry.codes(fmt):
            filename = barcode_filename(fmt, build_payload(code, fmt))
            images.append({
                'code': code,
                'filename': filename,
                'url': url_for('barcodes.barcode_image', filename=filename),
            })
        columns.append({'fmt': fmt, 'label': FORMAT_LABELS[fmt], 'images': images})

    import_ok = request.args.get('importStatus') == 'success'
    return render_template('index.html', columns=columns, import_ok=import_ok)

@bp.route('/import', methods=['POST'])
def import_file():
    fmt = request.form.get('format')
    if not is_valid_format(fmt):
        raise ClientInputError("Formato inválido. Escolha entre code128, ean13 ou ean14.")

    file = request.files.get('file')
    if not file or not file.filename:
        raise ClientInputError("Nenhum arquivo enviado.")

    try:
        result = import_codes(
            get_registry(), fmt, file.read(), current_app.config['BARCODE_DIR']
        )
    except ClientInputError:
        raise
    except Exception:
        logger.exception("Failed to import %s codes from %s", fmt, file.filename)
        return "Erro ao importar dados do Excel", 500

    msg = f"{len(result.imported)} código(s) {FORMAT_LABELS[fmt]} importado(s)."
    if result.dropped:
        msg += f" {len(result.dropped)} ignorado(s): " + ", ".join(str(c) for c in result.dropped)
    flash(msg, "warning" if result.dropped else "success")
    return redirect(url_for('barcodes.index', importStatus='success'))

@bp.route('/export')
def export_file():
    fmt = request.args.get('format')
    # Validate before touching the filesystem
    select_entries(get_registry(), fmt)

    try:
        result = export_codes(
            get_registry(), fmt,
            current_app.config['BARCODE_DIR'],
            current_app.config['EXPORT_DIR']
        )
    except Exception:
        logger.exception("Failed to export %s codes", fmt)
        return "Erro ao exportar para Excel", 500

    return send_file(result.path, as_attachment=True, download_name=export_filename(fmt))

@bp.route('/clear', methods=['POST'])
def clear():
    fmt = request.form.get('format')
    removed = clear_codes(get_registry(), fmt, current_app.config['BARCODE_DIR'])
    flash(f"{FORMAT_LABELS[fmt]}: {removed} imagem(ns) removida(s).", "success")
    return redirect(url_for('barcodes.index', clearStatus='success'))

@bp.route('/barcodes/<path:filename>')
def barcode_image(filename):
    return send_from_directory(current_app.config['BARCODE_DIR'], filename)

def handle_client_error(e):
    return str(e), 400

def create_app(config_object=Config):
    app = Flask(__name__, static_folder='public', static_url_path='')
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    app.extensions['code_registry'] = CodeRegistry()
    app.register_blueprint(bp)
    app.register_error_handler(ClientInputError, handle_client_error)
    return app

app = create_app()

if __name__ == '__main__':
    print(f"\n\n === Servidor rodando em http://localhost:{app.config['PORT']} === \n\n")
    app.run(debug=True, host=app.config['HOST'], port=app.config['PORT'])
