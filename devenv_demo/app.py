from flask import Flask

WELCOME_MESSAGE = "Welcome to your development environment!"

# No static folder; GET / is the only route the application serves
app = Flask(__name__, static_folder=None)

@app.get("/")
def welcome():
    return WELCOME_MESSAGE, 200, {"Content-Type": "text/plain; charset=utf-8"}
