from flask import Blueprint, current_app, jsonify, request, send_file

from blockstars import config
from blockstars.config import STYLE_METADATA, StyleOptions
from blockstars.kernel.blockchain import SAMPLE_BLOCKS, BlockData
from blockstars.kernel.composer import SceneComposer
from blockstars.kernel.errors import BlockStarsError, SceneNotReadyError

bp = Blueprint("api", __name__, url_prefix="/")

# one scene per process
composer = SceneComposer(StyleOptions(), deterministic_stars=not config.SESSION_STARS)


def _error(message, status):
    return jsonify({"ok": False, "error": message}), status


def _derive(block: BlockData):
    attrs = composer.on_block_change(block)
    current_app.logger.info("derived block %s seed=%s color=%s",
                            block.number, attrs.seed_hex, attrs.hex_color)
    return jsonify({"ok": True, "block": block.number, "attributes": attrs.to_dict()})


# ---------- health / version ----------
@bp.route("/health")
def health():
    return jsonify({"ok": True})

@bp.route("/version")
def version():
    return jsonify({"name": "BlockStars", "generator": "mt19937", "api": 1})

@bp.route("/style")
def style():
    meta = dict(STYLE_METADATA)
    meta["options"] = composer.options.to_dict()
    return jsonify(meta)

# ---------- host lifecycle ----------
@bp.route("/api/block", methods=["POST"])
def block_change():
    data = request.get_json(force=True, silent=True) or {}
    try:
        block = BlockData.from_dict(data)
        return _derive(block)
    except ValueError as e:
        return _error(str(e), 400)

@bp.route("/api/viewport", methods=["POST"])
def viewport():
    data = request.get_json(force=True, silent=True) or {}
    try:
        zoom = composer.on_viewport_resize(float(data["width"]), float(data["height"]))
    except (KeyError, TypeError, ValueError) as e:
        return _error(f"bad viewport: {e}", 400)
    return jsonify({"zoom": zoom})

@bp.route("/api/options", methods=["POST"])
def options():
    data = request.get_json(force=True, silent=True) or {}
    try:
        opts = composer.set_options(data)
    except ValueError as e:
        return _error(str(e), 400)
    return jsonify({"ok": True, "options": opts.to_dict()})

# ---------- metadata / scene ----------
@bp.route("/api/metadata")
def metadata():
    try:
        return jsonify(composer.get_metadata())
    except SceneNotReadyError as e:
        return _error(str(e), 409)

@bp.route("/api/scene")
def scene():
    meshes = request.args.get("meshes", "0") in ("1", "true", "yes")
    try:
        return jsonify(composer.snapshot(include_meshes=meshes))
    except SceneNotReadyError as e:
        return _error(str(e), 409)

@bp.route("/api/stars/<name>")
def star(name):
    try:
        s = composer.star(name)
    except KeyError:
        return _error(f"unknown star {name}", 404)
    except SceneNotReadyError as e:
        return _error(str(e), 409)
    return jsonify(s.to_dict(include_meshes=True))

@bp.route("/api/export", methods=["GET"])
def export_file():
    try:
        path = composer.export_state(config.STATE_PATH)
    except SceneNotReadyError as e:
        return _error(str(e), 409)
    return send_file(path, as_attachment=True, download_name="scene_state.json",
                     mimetype="application/json")

# ---------- sample blocks ----------
@bp.route("/samples", methods=["GET"])
def samples():
    return jsonify([
        {"index": i, "number": b.number, "hash": b.hash, "transactions": len(b.transactions)}
        for i, b in enumerate(SAMPLE_BLOCKS)
    ])

@bp.route("/samples/<int:index>", methods=["POST"])
def use_sample(index):
    if index >= len(SAMPLE_BLOCKS):
        return _error(f"no sample block {index}", 404)
    try:
        return _derive(SAMPLE_BLOCKS[index])
    except BlockStarsError as e:
        return _error(str(e), 400)
