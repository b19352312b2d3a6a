# wsgi.py
import os

from lockstep import create_app

app = create_app(os.getenv("LOCKSTEP_ENV", "production"))

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 8787)))
