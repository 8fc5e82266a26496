"""Development entrypoint delegating to the application package."""

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from campus_match.main import create_app


app = create_app()
socketio = app.extensions["socketio"]


if __name__ == "__main__":
    socketio.run(app, host="0.0.0.0", port=app.config["PORT"], debug=True, allow_unsafe_werkzeug=True)
