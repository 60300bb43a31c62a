from dotenv import load_dotenv

from src.payroll_system.payroll_system.main import create_app

load_dotenv(override=False)

app = create_app()

if __name__ == "__main__":
    app.run(debug=app.config.get("DEBUG", False))
