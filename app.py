from syncvision.app import main


# Local development entrypoint: `python app.py`.
# Starts the Socket.IO server on HOST:PORT (default 0.0.0.0:5000) and exits
# with status 1 when MongoDB is unreachable at startup.
if __name__ == "__main__":
    main()
