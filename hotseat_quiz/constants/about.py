"""Static metadata describing HotseatQuiz."""

APP_NAME = "HotseatQuiz"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "HotseatQuiz is a turn-based trivia engine: players share one device, take turns "
    "answering timed multiple-choice questions, and climb from easy to hard bonus groups."
)
