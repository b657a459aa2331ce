import asyncio
import logging

from flask import Blueprint, Response, current_app, jsonify, request
from pydantic import ValidationError

from idx_wrapper.model import WrapFailure, WrapRequest

logger = logging.getLogger(__name__)

# Blueprint exposing the wrapper pipeline over HTTP
wrap_router = Blueprint('wrap_router', __name__)


@wrap_router.route('/wrapper', methods=['GET'])
def create_wrapper():
    """
    Builds the wrapper for the site given on the query string.
    Responds with the wrapper HTML, or with the JSON error object when the
    site could not be fetched.
    """
    try:
        wrap_request = WrapRequest.model_validate(request.args.to_dict())
    except ValidationError as e:
        logger.warning("Rejected wrapper request: %s", e)
        return jsonify({
            "error": "Invalid wrapper request",
            "details": e.errors(include_url=False, include_context=False, include_input=False)
        }), 400

    controller = current_app.config['WRAP_CONTROLLER']
    outcome = asyncio.run(controller.wrap(wrap_request))

    if isinstance(outcome, WrapFailure):
        return jsonify(outcome.to_dict())

    return Response(outcome, mimetype='text/html')


@wrap_router.route('/health', methods=['GET'])
def health():
    return jsonify({"status": "ok"})
