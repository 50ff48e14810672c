from charity_api import create_app
import os

app = create_app()

if __name__ == "__main__":
    port = int(os.getenv("PORT", 5000))
    app.run(host="127.0.0.1", port=port, debug=False, use_reloader=False)

# --- LOCAL ---
# createdb charity_dev
# alembic upgrade head
# python scripts/seed.py
# PORT=5000 python run.py
