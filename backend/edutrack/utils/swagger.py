"""Swagger/OpenAPI description of the EduTrack API."""

SWAGGER_URL = '/api/docs'
API_URL = '/api/swagger.json'

_JSON = 'application/json'


def _body(required, properties):
    return {
        "required": True,
        "content": {
            _JSON: {
                "schema": {"type": "object", "required": required, "properties": properties}
            }
        }
    }


def _responses(ok_description, *errors):
    responses = {
        "200": {
            "description": ok_description,
            "content": {_JSON: {"schema": {"$ref": "#/components/schemas/Success"}}}
        }
    }
    for code, description in errors:
        responses[str(code)] = {
            "description": description,
            "content": {_JSON: {"schema": {"$ref": "#/components/schemas/Error"}}}
        }
    return responses


def _path_id(name):
    return {"name": name, "in": "path", "required": True, "schema": {"type": "integer"}}


def _query(name, schema=None):
    return {"name": name, "in": "query", "required": False, "schema": schema or {"type": "string"}}


_STATUS = {"type": "string", "enum": ["present", "absent", "late", "excused"]}
_SECURED = [{"bearerAuth": []}]


def generate_swagger_spec():
    """Generate OpenAPI/Swagger specification."""
    return {
        "openapi": "3.0.0",
        "info": {
            "title": "EduTrack API",
            "description": "Classroom attendance with daily QR sessions and manual marking",
            "version": "1.0.0"
        },
        "servers": [{"url": "/api", "description": "Current server"}],
        "components": {
            "securitySchemes": {
                "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
            },
            "schemas": {
                "Session": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer"},
                        "teacher_id": {"type": "integer"},
                        "class_name": {"type": "string"},
                        "session_date": {"type": "string", "format": "date"},
                        "qr_code": {"type": "string"},
                        "is_active": {"type": "boolean"},
                        "expires_at": {"type": "string", "format": "date-time"}
                    }
                },
                "AttendanceRecord": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer"},
                        "session_id": {"type": "integer"},
                        "student_id": {"type": "integer"},
                        "status": _STATUS,
                        "method": {"type": "string", "enum": ["qr_scan", "manual"]},
                        "reason": {"type": "string", "nullable": True},
                        "notes": {"type": "string", "nullable": True},
                        "submitted_at": {"type": "string", "format": "date-time"}
                    }
                },
                "Error": {
                    "type": "object",
                    "properties": {
                        "error": {"type": "boolean"},
                        "message": {"type": "string"},
                        "code": {"type": "string"},
                        "status_code": {"type": "integer"},
                        "retryable": {"type": "boolean"}
                    }
                },
                "Success": {
                    "type": "object",
                    "properties": {
                        "error": {"type": "boolean", "default": False},
                        "message": {"type": "string"},
                        "data": {"type": "object"}
                    }
                }
            }
        },
        "paths": {
            "/auth/signup": {
                "post": {
                    "tags": ["Authentication"],
                    "summary": "Create teacher account",
                    "requestBody": _body(["email", "password", "full_name"], {
                        "email": {"type": "string", "format": "email"},
                        "password": {"type": "string", "minLength": 6},
                        "full_name": {"type": "string"},
                        "school_name": {"type": "string"}
                    }),
                    "responses": _responses("Account created", (400, "Validation error"))
                }
            },
            "/auth/login": {
                "post": {
                    "tags": ["Authentication"],
                    "summary": "Teacher login",
                    "requestBody": _body(["email", "password"], {
                        "email": {"type": "string", "format": "email"},
                        "password": {"type": "string"}
                    }),
                    "responses": _responses("Tokens issued", (401, "Invalid credentials"))
                }
            },
            "/auth/refresh": {
                "post": {
                    "tags": ["Authentication"],
                    "summary": "Exchange a refresh token for a new access token",
                    "security": _SECURED,
                    "responses": _responses("Access token issued", (401, "Invalid or expired refresh token"))
                }
            },
            "/auth/me": {
                "get": {
                    "tags": ["Authentication"],
                    "summary": "Current teacher profile",
                    "security": _SECURED,
                    "responses": _responses("Teacher profile", (401, "Unauthenticated"))
                }
            },
            "/attendance/sessions": {
                "post": {
                    "tags": ["Sessions"],
                    "summary": "Create or return today's QR session",
                    "security": _SECURED,
                    "requestBody": _body(["class_name"], {"class_name": {"type": "string"}}),
                    "responses": _responses("Session and QR payload", (400, "Validation error"),
                                            (401, "Unauthenticated"))
                }
            },
            "/attendance/sessions/{session_id}/qr-code": {
                "get": {
                    "tags": ["Sessions"],
                    "summary": "QR code PNG for a session",
                    "parameters": [_path_id("session_id")],
                    "responses": {
                        "200": {"description": "PNG image", "content": {"image/png": {}}},
                        "404": {"description": "Session not found"}
                    }
                }
            },
            "/attendance/sessions/{session_id}/deactivate": {
                "post": {
                    "tags": ["Sessions"],
                    "summary": "Deactivate a session",
                    "security": _SECURED,
                    "parameters": [_path_id("session_id")],
                    "responses": _responses("Session deactivated", (404, "Session not found"))
                }
            },
            "/attendance/sessions/{session_id}/students": {
                "get": {
                    "tags": ["Sessions"],
                    "summary": "Students for the self-service form",
                    "parameters": [_path_id("session_id")],
                    "responses": _responses("Session and students", (404, "Session not found"))
                }
            },
            "/attendance/scan": {
                "post": {
                    "tags": ["Attendance"],
                    "summary": "Redeem scanned QR data",
                    "requestBody": _body(["qr_data"], {"qr_data": {"type": "string"}}),
                    "responses": _responses("Redirect target and session", (400, "Expired or malformed token"),
                                            (404, "Session not found"))
                }
            },
            "/attendance/submit": {
                "post": {
                    "tags": ["Attendance"],
                    "summary": "Self-service attendance submission",
                    "requestBody": _body(["session_id", "full_name"], {
                        "session_id": {"type": "integer"},
                        "student_id": {"type": "integer"},
                        "full_name": {"type": "string"},
                        "student_number": {"type": "string"},
                        "status": _STATUS
                    }),
                    "responses": _responses("Record created", (404, "Session or student not found"),
                                            (409, "Duplicate submission"))
                }
            },
            "/attendance/manual": {
                "post": {
                    "tags": ["Attendance"],
                    "summary": "Mark or correct attendance manually",
                    "security": _SECURED,
                    "requestBody": _body(["student_id", "status"], {
                        "student_id": {"type": "integer"},
                        "status": _STATUS,
                        "reason": {"type": "string"},
                        "notes": {"type": "string"}
                    }),
                    "responses": _responses("Record created or updated", (404, "Student not found"))
                }
            },
            "/attendance/today": {
                "get": {
                    "tags": ["Attendance"],
                    "summary": "Today's records for the caller",
                    "security": _SECURED,
                    "responses": _responses("Records")
                }
            },
            "/students/": {
                "get": {
                    "tags": ["Students"],
                    "summary": "List active students",
                    "security": _SECURED,
                    "responses": _responses("Students")
                },
                "post": {
                    "tags": ["Students"],
                    "summary": "Add student",
                    "security": _SECURED,
                    "requestBody": _body(["full_name"], {
                        "full_name": {"type": "string"},
                        "student_number": {"type": "string"},
                        "class_name": {"type": "string"}
                    }),
                    "responses": _responses("Student created", (400, "Validation error"))
                }
            },
            "/students/{student_id}": {
                "put": {
                    "tags": ["Students"],
                    "summary": "Update student",
                    "security": _SECURED,
                    "parameters": [_path_id("student_id")],
                    "responses": _responses("Student updated", (404, "Student not found"))
                },
                "delete": {
                    "tags": ["Students"],
                    "summary": "Soft delete student",
                    "security": _SECURED,
                    "parameters": [_path_id("student_id")],
                    "responses": _responses("Student deleted", (404, "Student not found"))
                }
            },
            "/reports/stats": {
                "get": {
                    "tags": ["Reports"],
                    "summary": "Today's statistics and trends",
                    "security": _SECURED,
                    "parameters": [_query("period", {"type": "string", "enum": ["day", "week", "month", "year"]})],
                    "responses": _responses("Statistics")
                }
            },
            "/reports/daily": {
                "get": {
                    "tags": ["Reports"],
                    "summary": "Statistics for one day",
                    "security": _SECURED,
                    "parameters": [_query("date", {"type": "string", "format": "date"})],
                    "responses": _responses("Statistics", (400, "Invalid date"))
                }
            },
            "/reports/report": {
                "get": {
                    "tags": ["Reports"],
                    "summary": "Attendance report",
                    "security": _SECURED,
                    "parameters": [
                        _query("start_date", {"type": "string", "format": "date"}),
                        _query("end_date", {"type": "string", "format": "date"}),
                        _query("student_id"),
                        _query("class_name"),
                        _query("group_by", {"type": "string", "enum": ["date", "student"]})
                    ],
                    "responses": _responses("Report")
                }
            }
        },
        "tags": [
            {"name": "Authentication", "description": "Teacher accounts"},
            {"name": "Sessions", "description": "Daily attendance sessions"},
            {"name": "Attendance", "description": "QR redemption and attendance records"},
            {"name": "Students", "description": "Student roster"},
            {"name": "Reports", "description": "Attendance statistics"}
        ]
    }
