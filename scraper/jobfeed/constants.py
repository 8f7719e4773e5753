"""LinkedIn URLs, auth cookie parameters and DOM selectors.

LinkedIn changes markup frequently; selectors are kept in one place so a
layout change is a one-file edit.
"""
from __future__ import annotations

HOME_URL = 'https://www.linkedin.com/feed/'
JOBS_SEARCH_URL = 'https://www.linkedin.com/jobs/search/'

AUTH_COOKIE_NAME = 'li_at'
AUTH_COOKIE_DOMAIN = '.linkedin.com'
AUTH_COOKIE_PATH = '/'

# Global nav is only rendered for an authenticated member
ACTIVE_MENU_SELECTOR = 'nav.global-nav__content, img.global-nav__me-photo'

JOB_CARD_SELECTOR = 'li[data-occludable-job-id]'

# Placeholders shown while the result list is still being fetched
JOB_CARD_SKELETON_SELECTORS = [
    'div.job-card-container__skeleton',
    'li.jobs-search-results__list-item--skeleton',
    'div.scaffold-layout__list-detail-inner--skeleton',
]

CARD_TITLE_SELECTORS = [
    'a.job-card-list__title',
    'a.job-card-container__link strong',
    '.job-card-list__title',
    'strong',
]
CARD_COMPANY_SELECTORS = [
    '.artdeco-entity-lockup__subtitle',
    '.job-card-container__primary-description',
    '.job-card-container__company-name',
]
CARD_LOCATION_SELECTORS = [
    '.job-card-container__metadata-wrapper li',
    '.job-card-container__metadata-item',
    '.artdeco-entity-lockup__caption',
]
CARD_LINK_SELECTOR = 'a[href*="/jobs/view/"]'

JOB_VIEW_URL = 'https://www.linkedin.com/jobs/view/{job_id}/'
