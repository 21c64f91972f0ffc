from __future__ import annotations

from urllib.parse import quote

import pytest
from selenium.webdriver.common.by import By

from tests.helpers import LOGIN_PAGE, managed_driver


@pytest.mark.integration
def test_broken_xpath_heals_in_a_real_browser(suite_config):
    suite_config.environment.headless = True

    with managed_driver(suite_config) as driver:
        driver.get("data:text/html;charset=utf-8," + quote(LOGIN_PAGE))
        element = driver.find_element(By.XPATH, "//button[@id='login-btn']")

        assert element.get_attribute("id") == "login-btn"
        assert element.text == "Sign in"
        assert driver.healer.cache.lookup("//button[@id='login-btn']").endswith("div[@id='login-btn']")
