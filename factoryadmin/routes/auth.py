from __future__ import annotations

from urllib.parse import urljoin, urlparse

from flask import Blueprint, flash, redirect, render_template, request, url_for
from flask_login import current_user, login_required, login_user, logout_user

from factoryadmin.services import users as users_service
from factoryadmin.services.api_client import ApiError
from factoryadmin.session import AuthenticationError, get_session_manager
from factoryadmin.utils.forms import form_text

bp = Blueprint("auth", __name__, url_prefix="/auth")


def _safe_redirect_target(target: str | None, *, default: str) -> str:
    if not target:
        return url_for(default)

    # Internal absolute paths only; "//host" is protocol-relative.
    if target.startswith("/") and not target.startswith("//"):
        return target

    app_url = urlparse(request.host_url)
    parsed_target = urlparse(urljoin(request.host_url, target))
    if parsed_target.netloc == app_url.netloc:
        return parsed_target.path + (f"?{parsed_target.query}" if parsed_target.query else "")

    return url_for(default)


@bp.route("/login", methods=["GET", "POST"])
def login():
    if current_user.is_authenticated:
        return redirect(url_for("dashboard.home"))

    email_value = ""
    if request.method == "POST":
        email_value = form_text("email")
        password = request.form.get("password") or ""
        if not email_value or not password:
            flash("Email and password are required.", "danger")
            return render_template("auth/login.html", email_value=email_value)

        try:
            identity = get_session_manager().login(email_value, password)
        except AuthenticationError as exc:
            flash(exc.message, "danger")
            return render_template("auth/login.html", email_value=email_value)

        login_user(identity)
        flash(f"Welcome back, {identity.name or identity.email}!", "success")
        return redirect(_safe_redirect_target(request.args.get("next"), default="dashboard.home"))

    return render_template("auth/login.html", email_value=email_value)


@bp.route("/logout", methods=["POST"])
def logout():
    get_session_manager().logout()
    logout_user()
    flash("Logged out", "success")
    return redirect(url_for("auth.login"))


@bp.route("/profile", methods=["GET", "POST"])
@login_required
def profile():
    manager = get_session_manager()
    identity = manager.current
    form_values = {
        "name": identity.name if identity else "",
        "email": identity.email if identity else "",
    }

    if request.method == "POST":
        form_values = {"name": form_text("name"), "email": form_text("email")}
        password = request.form.get("password") or ""
        confirm_password = request.form.get("confirm_password") or ""

        if not form_values["name"] or not form_values["email"]:
            flash("Name and email are required.", "danger")
            return render_template("auth/profile.html", form_values=form_values)

        if password != confirm_password:
            flash("Passwords do not match", "danger")
            return render_template("auth/profile.html", form_values=form_values)

        payload = dict(form_values)
        if password:
            payload["password"] = password

        try:
            updated = users_service.update_profile(payload)
        except ApiError as exc:
            flash(exc.message or "Error updating profile", "danger")
            return render_template("auth/profile.html", form_values=form_values)

        manager.update_user(updated)
        flash("Profile updated successfully", "success")
        return redirect(url_for("auth.profile"))

    return render_template("auth/profile.html", form_values=form_values)
