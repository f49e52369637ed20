from factoryadmin import create_app

app = create_app()

if __name__ == "__main__":
    # The REST backend usually owns port 5000, so the console listens on 8000.
    app.run(host="0.0.0.0", port=8000, debug=True)
