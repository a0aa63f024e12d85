import threading
import uuid
from collections import OrderedDict

from flask import Flask, Response, jsonify, render_template, request

from background import BackgroundAnimator, PARTICLE_COUNT, SvgSurface
from weather_lookup import configure_logging
from weather_widget import WeatherWidget

DEFAULT_CITY = "New York"
MAX_CLIENTS = 500


class Client:
    """Everything one open page owns: its result panel and its particle pool."""

    def __init__(self, particle_count=PARTICLE_COUNT):
        self.widget = WeatherWidget()
        self.animator = BackgroundAnimator(count=particle_count)
        self.surface = SvgSurface()
        self.frame_lock = threading.Lock()


class ClientRegistry:
    """Per-page state keyed by the id handed out with the page.

    The least recently used client is evicted past ``max_clients``; an
    unknown id (e.g. after a restart) simply gets fresh state.
    """

    def __init__(self, particle_count=PARTICLE_COUNT, max_clients=MAX_CLIENTS):
        self.particle_count = particle_count
        self.max_clients = max_clients
        self._clients = OrderedDict()
        self._lock = threading.Lock()

    def create(self):
        client_id = uuid.uuid4().hex
        return client_id, self.get(client_id)

    def get(self, client_id):
        if not client_id:
            return Client(self.particle_count)
        with self._lock:
            client = self._clients.get(client_id)
            if client is None:
                client = self._clients[client_id] = Client(self.particle_count)
                while len(self._clients) > self.max_clients:
                    self._clients.popitem(last=False)
            else:
                self._clients.move_to_end(client_id)
            return client

    def __len__(self):
        return len(self._clients)


def create_app(config=None):
    app = Flask(__name__)
    app.config.from_mapping(
        DEFAULT_CITY=DEFAULT_CITY,
        PARTICLE_COUNT=PARTICLE_COUNT,
        MAX_CLIENTS=MAX_CLIENTS,
    )
    if config:
        app.config.update(config)

    app.extensions["clients"] = ClientRegistry(app.config["PARTICLE_COUNT"], app.config["MAX_CLIENTS"])

    @app.route("/")
    def home():
        client_id, client = app.extensions["clients"].create()
        panel = client.widget.lookup(app.config["DEFAULT_CITY"])
        return render_template("index.html", client_id=client_id, panel=panel)

    @app.route("/api/weather")
    def weather():
        client = app.extensions["clients"].get(request.args.get("client"))
        panel = client.widget.submit(request.args.get("city", ""))
        if panel is None:
            return "", 204
        return jsonify(panel)

    @app.route("/background.svg")
    def background():
        client = app.extensions["clients"].get(request.args.get("client"))
        width = request.args.get("width", type=int)
        height = request.args.get("height", type=int)
        with client.frame_lock:
            animator = client.animator
            if width and height and (width, height) != (animator.width, animator.height):
                animator.resize(width, height)
            svg = animator.frame(client.surface).to_svg()
        return Response(svg, mimetype="image/svg+xml")

    return app


def main():
    configure_logging()
    create_app().run(debug=True)


if __name__ == "__main__":

    main()
