import os
from flask import Flask, request, jsonify, render_template
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from meal_info_engine import MealInfoClient
from meal_query_controller import MealQueryController
from display import Error, MealView
from config import Config
import logging

# --- 1. SETUP THE FLASK APP ---
app = Flask(__name__)
CORS(app)
logging.basicConfig(level=logging.INFO)

# --- 2. CONFIGURE RATE LIMITING ---
limiter = Limiter(
    get_remote_address,
    app=app,
    default_limits=["1000 per day", "200 per hour"], # Fallback
    storage_uri="memory://",
)

limit_minute = f"{Config.RATE_LIMIT_PER_MINUTE} per minute"
limit_hour = f"{Config.RATE_LIMIT_PER_HOUR} per hour"
limit_day = f"{Config.RATE_LIMIT_PER_DAY} per day"

# --- 3. ERROR DETAILS ---
SHOW_ERROR_DETAILS = os.environ.get("SHOW_ERROR_DETAILS", "false").lower() == "true"

# --- 4. CONTROLLER FACTORY ---
meal_client = MealInfoClient()

def new_controller(date_value=""):
    """Creates a controller bound to a fresh view for one request."""
    return MealQueryController(
        view=MealView(date_value=date_value),
        client=meal_client,
        show_error_details=SHOW_ERROR_DETAILS,
    )

# --- 5. HEALTH CHECK ROUTE ---
@app.route("/health")
def health_check():
    """A simple route to confirm the server is running."""
    return jsonify({"status": "healthy", "message": "School lunch lookup is running."})

# --- 6. PAGE ---
@app.route("/")
@limiter.limit(limit_minute)
@limiter.limit(limit_hour)
@limiter.limit(limit_day)
def index():
    """
    Without a date the page mounts: today's date is filled in and queried after
    a short delay. With ?date=... (button or Enter in the date field) the
    query is submitted straight away.
    """
    selected_date = request.args.get("date")
    controller = new_controller(selected_date or "")

    try:
        if selected_date is None:
            controller.mount()
            controller.wait_for_initial_query()
        else:
            controller.submit(selected_date.strip())
    except Exception as e:
        app.logger.error(f"Error rendering meal page: {e}")
        controller.set_state(Error(Config.MSG_FETCH_FAILED))
    finally:
        controller.unmount()

    return render_template("index.html", view=controller.view, state=controller.state)

# --- 7. API ENDPOINTS ---
@app.route("/api/meal", methods=["GET"])
@limiter.limit(limit_minute)
@limiter.limit(limit_hour)
@limiter.limit(limit_day)
def api_meal():
    try:
        selected_date = request.args.get("date", "").strip()
        controller = new_controller(selected_date)
        state = controller.submit(selected_date)

        if isinstance(state, Error):
            # empty or calendar-invalid dates are client errors
            client_error = not selected_date or isinstance(controller.last_error, ValueError)
            status = 400 if client_error else 502
            return jsonify(state.to_dict()), status

        return jsonify(state.to_dict())

    except Exception as e:
        app.logger.error(f"Error in /api/meal: {e}")
        return jsonify({"error": "An internal error occurred."}), 500

# --- 8. START THE SERVER ---
if __name__ == "__main__":
    app.logger.info("Starting Flask development server...")
    # Use 0.0.0.0 to be accessible on the network
    app.run(host='0.0.0.0', debug=False, port=int(os.environ.get("PORT", 5000)))
