import sys
from flask import Flask
from blockstars.api.routes import bp as api_bp
from blockstars.config import DEFAULT_PORT

app = Flask(__name__)
app.register_blueprint(api_bp)


def main(argv=None):
    argv = sys.argv if argv is None else argv
    port = DEFAULT_PORT
    if "--port" in argv:
        try:
            i = argv.index("--port")
            port = int(argv[i+1])
        except (IndexError, ValueError):
            print("[BlockStars] bad --port value, using default")
    print(f"[BlockStars] running at http://0.0.0.0:{port}")
    app.run(host="0.0.0.0", port=port, debug=False)


if __name__ == "__main__":
    main()
