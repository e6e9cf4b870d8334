from typing import Optional

from flask import Flask, jsonify, request

from randpass.config import load_config, options_from_config
from randpass.errors import InvalidOptionsError
from randpass.options import GenerationOptions, check_options, normalize
from randpass.service import STATUS_ERROR, GenerationWorker, generator_for_config
from randpass.validator import count_classes, is_valid

app = Flask(__name__)

# loaded on first use, not at import
_cfg: Optional[dict] = None
_worker: Optional[GenerationWorker] = None


def current_config() -> dict:
    global _cfg
    if _cfg is None:
        _cfg = load_config()
    return _cfg

def current_worker() -> GenerationWorker:
    """All requests share one pool, driven by one worker loop."""
    global _worker
    if _worker is None:
        _worker = GenerationWorker(generator_for_config(current_config()))
    return _worker

def _request_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidOptionsError("Request body must be a JSON object")
    return data

def _options_from_request(data: dict) -> GenerationOptions:
    requested = data.get('options') or {}
    if not isinstance(requested, dict):
        raise InvalidOptionsError("options must be a JSON object")
    base = options_from_config(current_config()).to_dict()
    base.update(requested)
    options = normalize(GenerationOptions.from_dict(base))
    check_options(options)
    return options

def _bad_request(e: Exception):
    return jsonify({'status': STATUS_ERROR, 'message': str(e)}), 400

@app.route('/')
def home():
    return jsonify({
        "message": "randpass API is running"
    })

@app.route('/generate', methods=['POST'])
def generate_route():
    try:
        data = _request_body()
        options = _options_from_request(data)
        timeout = float(data.get('timeout', current_config()["timeout_seconds"]))
    except (InvalidOptionsError, TypeError, ValueError) as e:
        return _bad_request(e)
    result = current_worker().run(options, timeout)
    if result.status == STATUS_ERROR:
        return jsonify(result.to_dict()), 503
    return jsonify(result.to_dict())

@app.route('/validate', methods=['POST'])
def validate_route():
    try:
        data = _request_body()
        password = data.get('password', '')
        if not isinstance(password, str):
            raise InvalidOptionsError("password must be a string")
        options = _options_from_request(data)
    except (InvalidOptionsError, TypeError, ValueError) as e:
        return _bad_request(e)
    counts = count_classes(password)
    return jsonify({
        'valid': is_valid(password, options),
        'counts': {cls.value: n for cls, n in counts.items()},
    })

if __name__ == "__main__":
    app.run(debug=True)
