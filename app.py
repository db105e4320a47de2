from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv

load_dotenv()

import config
from database import close_db
from views.contests import contests_bp
from views.status import status_bp

app = Flask(__name__)
if config.CORS_ALLOW_ORIGINS:
    CORS(
        app,
        origins=config.CORS_ALLOW_ORIGINS,
        supports_credentials=config.CORS_SUPPORTS_CREDENTIALS,
    )
else:
    CORS(app)

app.register_blueprint(contests_bp)
app.register_blueprint(status_bp)


@app.teardown_appcontext
def teardown_db(exception):
    close_db(exception)


@app.route("/")
def index():
    return "Contest Tracker API is running!"


@app.route("/healthz", methods=["GET"])
def healthz():
    return {"status": "ok"}, 200
