from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _SiteContentBase(BaseModel):
    # Stored with camelCase keys in site_content/homepage
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SiteContent(_SiteContentBase):
    school_name: str
    logo_url: str = ""
    hero_title: str
    hero_subtitle: str
    hero_image_url: str = ""
    mission_title: str
    mission_text1: str
    mission_text2: str
    mission_image_url: str = ""
    why_choose_title: str
    feature1_title: str
    feature1_text: str
    feature2_title: str
    feature2_text: str
    feature3_title: str
    feature3_text: str
    academics_title: str
    academics_text: str
    academics_image_url: str = ""
    community_title: str
    community_text: str
    community_image_url: str = ""
    facebook_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    updated_at: Optional[str] = None


class SiteContentUpdate(_SiteContentBase):
    """Fields to change; anything omitted keeps its stored or default value."""

    school_name: Optional[str] = None
    logo_url: Optional[str] = None
    hero_title: Optional[str] = None
    hero_subtitle: Optional[str] = None
    hero_image_url: Optional[str] = None
    mission_title: Optional[str] = None
    mission_text1: Optional[str] = None
    mission_text2: Optional[str] = None
    mission_image_url: Optional[str] = None
    why_choose_title: Optional[str] = None
    feature1_title: Optional[str] = None
    feature1_text: Optional[str] = None
    feature2_title: Optional[str] = None
    feature2_text: Optional[str] = None
    feature3_title: Optional[str] = None
    feature3_text: Optional[str] = None
    academics_title: Optional[str] = None
    academics_text: Optional[str] = None
    academics_image_url: Optional[str] = None
    community_title: Optional[str] = None
    community_text: Optional[str] = None
    community_image_url: Optional[str] = None
    facebook_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    linkedin_url: Optional[str] = None
