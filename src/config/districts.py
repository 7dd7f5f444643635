"""
Regional reference data for the Gyeongsangnam-do elderly care program.
Institution lists per city/county and province/district name tables used to
infer missing region columns.
"""

AREA_SETTINGS = {
    "name": "경상남도",
    "abbreviation": "경남",
}

# Key: city/county, Value: institutions operating the program there
DISTRICT_INSTITUTIONS = {
    "창원시": [
        "동진노인통합지원센터",
        "창원도우누리노인통합재가센터",
        "명진노인통합지원센터",
        "마산희망지역자활센터",
        "경남노인통합지원센터",
        "정현사회적협동조합",
        "진해서부노인종합복지관",
        "진해노인종합복지관",
        "경남고용복지센터",
        "마산회원노인종합복지관",
    ],
    "진주시": [
        "진양노인통합지원센터",
        "진주노인통합지원센터",
        "나누리노인통합지원센터",
        "공덕의집노인통합지원센터",
        "하늘마음노인통합지원센터",
    ],
    "통영시": ["통영시종합사회복지관", "통영노인통합지원센터"],
    "사천시": ["사랑원노인지원센터", "사천노인통합지원센터"],
    "김해시": [
        "효능원노인통합지원센터",
        "김해시종합사회복지관",
        "생명의전화노인통합지원센터",
        "보현행원노인통합지원센터",
        "김해돌봄지원센터",
    ],
    "밀양시": [
        "밀양시자원봉사단체협의회",
        "밀양노인통합지원센터",
        "우리들노인통합지원센터",
    ],
    "거제시": ["거제노인통합지원센터", "거제사랑노인복지센터"],
    "양산시": [
        "사회복지법인신생원양산재가노인복지센터",
        "양산행복한돌봄 사회적협동조합",
        "성요셉소규모노인종합센터",
    ],
    "의령군": ["의령노인통합지원센터"],
    "함안군": ["(사)대한노인회함안군지회", "함안군재가노인통합지원센터"],
    "창녕군": ["창녕군새누리노인종합센터", "사회적협동조합 창녕지역자활센터"],
    "고성군": ["대한노인회 고성군지회(노인맞춤돌봄서비스)", "한올생명의집"],
    "하동군": ["하동노인통합지원센터", "경남하동지역자활센터"],
    "산청군": [
        "산청한일노인통합지원센터",
        "산청복음노인통합지원센터",
        "산청해민노인통합지원센터",
        "산청성모노인통합지원센터",
    ],
    "함양군": ["사단법인 대한노인회 함양군지회"],
    "거창군": ["거창노인통합지원센터", "거창인애노인통합지원센터", "해월노인복지센터"],
    "합천군": [
        "미타재가복지센터",
        "합천노인통합지원센터",
        "코끼리행복복지센터",
        "사회적협동조합 합천지역자활센터",
    ],
    "남해군": ["화방남해노인통합지원센터", "화방재가복지센터"],
}

# Reverse lookup (institution -> district)
INSTITUTION_DISTRICT = {
    institution: district
    for district, institutions in DISTRICT_INSTITUTIONS.items()
    for institution in institutions
}

# Key: abbreviation found in institution names, Value: official province name
SIDO_NAMES = {
    "서울": "서울특별시",
    "부산": "부산광역시",
    "대구": "대구광역시",
    "인천": "인천광역시",
    "광주": "광주광역시",
    "대전": "대전광역시",
    "울산": "울산광역시",
    "세종": "세종특별자치시",
    "경기": "경기도",
    "강원": "강원특별자치도",
    "충북": "충청북도",
    "충남": "충청남도",
    "전북": "전북특별자치도",
    "전남": "전라남도",
    "경북": "경상북도",
    "경남": "경상남도",
    "제주": "제주특별자치도",
}

# City/county stems that imply a province
CITY_PROVINCE = {
    **{
        city: "경상남도"
        for city in (
            "창원", "진주", "통영", "사천", "김해", "밀양", "거제", "양산", "의령",
            "함안", "창녕", "고성", "남해", "하동", "산청", "함양", "거창", "합천",
        )
    },
    **{
        city: "경기도"
        for city in ("수원", "성남", "안양", "부천", "안산", "고양", "과천", "구리")
    },
    **{city: "서울특별시" for city in ("강남", "서초", "송파", "강동")},
}

SIGUNGU_NAMES = [
    # Seoul
    "강남구", "서초구", "송파구", "강동구", "마포구", "종로구", "중구", "용산구",
    "성동구", "광진구", "동대문구", "중랑구", "성북구", "강북구", "도봉구", "노원구",
    "은평구", "서대문구", "양천구", "강서구", "구로구", "금천구", "영등포구", "동작구",
    "관악구",
    # Gyeonggi-do
    "수원시", "성남시", "안양시", "부천시", "광명시", "평택시", "동두천시", "안산시",
    "고양시", "과천시", "구리시", "남양주시", "오산시", "시흥시", "군포시", "의왕시",
    "하남시", "용인시", "파주시", "이천시", "안성시", "김포시", "화성시", "광주시",
    "양주시", "포천시", "여주시", "연천군", "가평군", "양평군",
    # Gyeongsangnam-do
    "창원시", "진주시", "통영시", "사천시", "김해시", "밀양시", "거제시", "양산시",
    "의령군", "함안군", "창녕군", "고성군", "남해군", "하동군", "산청군", "함양군",
    "거창군", "합천군",
]

# Locations used by the institution matcher's location + facility rule
MATCH_LOCATIONS = [
    "창원", "진주", "통영", "사천", "김해", "밀양", "거제", "양산", "의령", "함안",
    "창녕", "고성", "남해", "하동", "산청", "함양", "거창", "합천", "경남", "경상남도",
]

# Ordered: the first pattern contained in a name wins
FACILITY_TYPES = [
    "사회복지관",
    "복지관",
    "노인복지",
    "장애인복지",
    "지원센터",
    "요양원",
    "요양병원",
    "재활원",
    "보호작업장",
    "주간보호",
    "단기보호",
    "공동생활가정",
    "그룹홈",
    "쉼터",
    "상담소",
]
