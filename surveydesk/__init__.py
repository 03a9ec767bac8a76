"""
SurveyDesk - Streamlit client for authoring, answering and reporting on surveys.
"""

__version__ = "0.1.0"
