app_name = "advisor_scheduling"
app_title = "Advisor Scheduling"
app_publisher = "Sebastian Ortiz Valencia"
app_description = "Disponibilidad semanal de advisors y links publicos de agendamiento"
app_email = "sebastianortiz989@gmail.com"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# Document Events
# ---------------
# Availability Window overlap validation lives in the DocType controller
# (doctype/availability_window/availability_window.py)
