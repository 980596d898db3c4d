from selenium.webdriver.chrome.options import Options


def _add_stability_options(options: Options) -> None:
    """Add stability options for Chrome."""
    stability_options = [
        "--no-sandbox",
        "--disable-dev-shm-usage",
        "--disable-gpu",
        "--disable-extensions",
        "--disable-default-apps",
        "--disable-sync",
        "--disable-hang-monitor",
        "--disable-prompt-on-repost",
        "--disable-component-update",
        "--no-default-browser-check",
        "--no-first-run",
        "--mute-audio",
    ]
    for option in stability_options:
        options.add_argument(option)


def _add_window_options(options: Options, window_width: int, window_height: int) -> None:
    options.add_argument(f"--window-size={window_width},{window_height}")


def _add_security_options(options: Options, ignore_https_errors: bool) -> None:
    if ignore_https_errors:
        options.add_argument("--ignore-certificate-errors")
        options.set_capability("acceptInsecureCerts", True)


def _add_profile_options(options: Options, profile_dir: str | None) -> None:
    """Point Chrome at a dedicated profile so cookies and storage stay per context."""
    if profile_dir:
        options.add_argument(f"--user-data-dir={profile_dir}")


def get_harness_chrome_options(
    headless: bool = True,
    profile_dir: str | None = None,
    ignore_https_errors: bool = True,
    window_width: int = 1920,
    window_height: int = 1080,
    extra_arguments: list[str] | None = None,
) -> Options:
    """Get Chrome options for a test browsing context with network and console logging on."""
    options = Options()

    if headless:
        options.add_argument("--headless=new")

    options.page_load_strategy = "normal"

    _add_stability_options(options)
    _add_window_options(options, window_width, window_height)
    _add_security_options(options, ignore_https_errors)
    _add_profile_options(options, profile_dir)

    for argument in extra_arguments or []:
        options.add_argument(argument)

    # Performance log carries Network.* events, browser log carries console output and page errors
    options.set_capability(
        "goog:loggingPrefs", {"browser": "ALL", "driver": "OFF", "performance": "ALL"}
    )
    options.add_experimental_option(
        "perfLoggingPrefs", {"enableNetwork": True, "enablePage": False}
    )

    return options
