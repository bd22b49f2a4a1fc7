"""Static lookup tables for the MOFA open data feed.

Country codes are MOFA's own numeric codes (mostly the international dialling
prefix, zero padded), not ISO codes. All tables are read-only.
"""

from collections.abc import Mapping
from types import MappingProxyType

from travel_info.models.travel_info import Embassy, EmergencyContact

# Destination (Japanese country, city or region name) -> MOFA country code.
# Many cities map to one country.
DESTINATION_TO_COUNTRY_CODE: Mapping[str, str] = MappingProxyType({
    # Asia
    "韓国": "0082",
    "韓国（ソウル）": "0082",
    "ソウル": "0082",
    "釜山": "0082",
    "中国": "0086",
    "北京": "0086",
    "上海": "0086",
    "香港": "0852",
    "マカオ": "0853",
    "台湾": "0886",
    "台北": "0886",
    "タイ": "0066",
    "バンコク": "0066",
    "チェンマイ": "0066",
    "プーケット": "0066",
    "ベトナム": "0084",
    "ハノイ": "0084",
    "ホーチミン": "0084",
    "ダナン": "0084",
    "シンガポール": "0065",
    "マレーシア": "0060",
    "クアラルンプール": "0060",
    "インドネシア": "0062",
    "バリ": "0062",
    "ジャカルタ": "0062",
    "フィリピン": "0063",
    "マニラ": "0063",
    "セブ": "0063",
    "カンボジア": "0855",
    "シェムリアップ": "0855",
    "プノンペン": "0855",
    "ミャンマー": "0095",
    "ラオス": "0856",
    "ブルネイ": "0673",
    "インド": "0091",
    "デリー": "0091",
    "ムンバイ": "0091",
    "ネパール": "0977",
    "スリランカ": "0094",
    "バングラデシュ": "0880",
    "パキスタン": "0092",
    "モンゴル": "0976",

    # Oceania
    "オーストラリア": "0061",
    "シドニー": "0061",
    "メルボルン": "0061",
    "ケアンズ": "0061",
    "ニュージーランド": "0064",
    "オークランド": "0064",
    "グアム": "1002",
    "サイパン": "1001",
    "フィジー": "0679",
    "パラオ": "0680",
    "タヒチ": "9689",
    "ニューカレドニア": "0687",

    # Europe
    "ウクライナ": "0380",
    "キーウ": "0380",
    "イギリス": "0044",
    "ロンドン": "0044",
    "フランス": "0033",
    "パリ": "0033",
    "ドイツ": "0049",
    "ベルリン": "0049",
    "ミュンヘン": "0049",
    "イタリア": "0039",
    "ローマ": "0039",
    "ミラノ": "0039",
    "フィレンツェ": "0039",
    "ベネチア": "0039",
    "スペイン": "0034",
    "マドリード": "0034",
    "バルセロナ": "0034",
    "ポルトガル": "0351",
    "リスボン": "0351",
    "オランダ": "0031",
    "アムステルダム": "0031",
    "ベルギー": "0032",
    "ブリュッセル": "0032",
    "スイス": "0041",
    "チューリッヒ": "0041",
    "ジュネーブ": "0041",
    "オーストリア": "0043",
    "ウィーン": "0043",
    "チェコ": "0420",
    "プラハ": "0420",
    "ポーランド": "0048",
    "ワルシャワ": "0048",
    "クラクフ": "0048",
    "ハンガリー": "0036",
    "ブダペスト": "0036",
    "ギリシャ": "0030",
    "アテネ": "0030",
    "トルコ": "0090",
    "イスタンブール": "0090",
    "クロアチア": "0385",
    "ドブロブニク": "0385",
    "フィンランド": "0358",
    "ヘルシンキ": "0358",
    "スウェーデン": "0046",
    "ストックホルム": "0046",
    "ノルウェー": "0047",
    "オスロ": "0047",
    "デンマーク": "0045",
    "コペンハーゲン": "0045",
    "アイルランド": "0353",
    "ダブリン": "0353",
    "アイスランド": "0354",
    "ロシア": "9007",
    "モスクワ": "9007",

    # North America (mainland US, Hawaii, Guam and Saipan have separate codes)
    "アメリカ": "1000",
    "ニューヨーク": "1000",
    "ロサンゼルス": "1000",
    "サンフランシスコ": "1000",
    "ラスベガス": "1000",
    "シアトル": "1000",
    "シカゴ": "1000",
    "ボストン": "1000",
    "マイアミ": "1000",
    "ワシントンDC": "1000",
    "サンディエゴ": "1000",
    "ハワイ": "1808",
    "ホノルル": "1808",
    "カナダ": "9001",
    "バンクーバー": "9001",
    "トロント": "9001",
    "モントリオール": "9001",

    # Latin America
    "メキシコ": "0052",
    "カンクン": "0052",
    "ブラジル": "0055",
    "リオデジャネイロ": "0055",
    "サンパウロ": "0055",
    "アルゼンチン": "0054",
    "ブエノスアイレス": "0054",
    "ペルー": "0051",
    "リマ": "0051",
    "マチュピチュ": "0051",
    "チリ": "0056",
    "キューバ": "0053",
    "ハバナ": "0053",
    "コスタリカ": "0506",

    # Middle East
    "UAE": "0971",
    "アラブ首長国連邦": "0971",
    "ドバイ": "0971",
    "アブダビ": "0971",
    "カタール": "0974",
    "ドーハ": "0974",
    "イスラエル": "0972",
    "ヨルダン": "0962",
    "オマーン": "0968",
    "バーレーン": "0973",
    "クウェート": "0965",
    "サウジアラビア": "0966",
    "イラン": "0098",
    "テヘラン": "0098",
    "イラク": "0964",
    "シリア": "0963",
    "レバノン": "0961",
    "イエメン": "0967",
    "アフガニスタン": "0093",
    "パレスチナ": "0970",

    # North Africa
    "エジプト": "0020",
    "カイロ": "0020",
    "モロッコ": "0212",
    "マラケシュ": "0212",
    "アルジェリア": "0213",
    "チュニジア": "0216",
    "リビア": "0218",
    "スーダン": "0249",
    "南スーダン": "0211",

    # West Africa
    "セネガル": "0221",
    "ダカール": "0221",
    "ガンビア": "0220",
    "マリ": "0223",
    "ギニア": "0224",
    "コートジボワール": "0225",
    "ブルキナファソ": "0226",
    "ニジェール": "0227",
    "トーゴ": "0228",
    "ベナン": "0229",
    "モーリタニア": "0222",
    "リベリア": "0231",
    "シエラレオネ": "0232",
    "ガーナ": "0233",
    "ナイジェリア": "0234",
    "ラゴス": "0234",
    "カーボベルデ": "0238",
    "ギニアビサウ": "0245",

    # Central Africa
    "チャド": "0235",
    "中央アフリカ": "0236",
    "カメルーン": "0237",
    "サントメ・プリンシペ": "0239",
    "赤道ギニア": "0240",
    "ガボン": "0241",
    "コンゴ共和国": "0242",
    "コンゴ民主共和国": "0243",
    "アンゴラ": "0244",

    # East Africa
    "エチオピア": "0251",
    "アディスアベバ": "0251",
    "ソマリア": "0252",
    "ジブチ": "0253",
    "ケニア": "0254",
    "ナイロビ": "0254",
    "タンザニア": "0255",
    "ダルエスサラーム": "0255",
    "ウガンダ": "0256",
    "カンパラ": "0256",
    "ブルンジ": "0257",
    "モザンビーク": "0258",
    "ルワンダ": "0250",
    "キガリ": "0250",
    "セーシェル": "0248",
    "エリトリア": "0291",

    # Southern Africa
    "南アフリカ": "0027",
    "ケープタウン": "0027",
    "ヨハネスブルグ": "0027",
    "ザンビア": "0260",
    "マダガスカル": "0261",
    "ジンバブエ": "0263",
    "ナミビア": "0264",
    "マラウイ": "0265",
    "レソト": "0266",
    "ボツワナ": "0267",
    "エスワティニ": "0268",
    "コモロ": "0269",
    "モーリシャス": "0230",
})

# MOFA country code -> canonical Japanese country name
COUNTRY_CODE_TO_NAME: Mapping[str, str] = MappingProxyType({
    "0082": "韓国",
    "0086": "中国",
    "0852": "香港",
    "0853": "マカオ",
    "0886": "台湾",
    "0066": "タイ",
    "0084": "ベトナム",
    "0065": "シンガポール",
    "0060": "マレーシア",
    "0062": "インドネシア",
    "0063": "フィリピン",
    "0855": "カンボジア",
    "0095": "ミャンマー",
    "0856": "ラオス",
    "0673": "ブルネイ",
    "0091": "インド",
    "0977": "ネパール",
    "0094": "スリランカ",
    "0880": "バングラデシュ",
    "0092": "パキスタン",
    "0976": "モンゴル",
    "0061": "オーストラリア",
    "0064": "ニュージーランド",
    "1002": "グアム",
    "1001": "北マリアナ諸島",
    "0679": "フィジー",
    "0680": "パラオ",
    "9689": "タヒチ",
    "0687": "ニューカレドニア",
    "0044": "イギリス",
    "0033": "フランス",
    "0049": "ドイツ",
    "0039": "イタリア",
    "0034": "スペイン",
    "0351": "ポルトガル",
    "0031": "オランダ",
    "0032": "ベルギー",
    "0041": "スイス",
    "0043": "オーストリア",
    "0420": "チェコ",
    "0048": "ポーランド",
    "0036": "ハンガリー",
    "0030": "ギリシャ",
    "0090": "トルコ",
    "0385": "クロアチア",
    "0358": "フィンランド",
    "0046": "スウェーデン",
    "0047": "ノルウェー",
    "0045": "デンマーク",
    "0353": "アイルランド",
    "0354": "アイスランド",
    "9007": "ロシア",
    "0380": "ウクライナ",
    "1000": "アメリカ",
    "1808": "ハワイ",
    "9001": "カナダ",
    "0052": "メキシコ",
    "0055": "ブラジル",
    "0054": "アルゼンチン",
    "0051": "ペルー",
    "0056": "チリ",
    "0053": "キューバ",
    "0506": "コスタリカ",
    "0971": "UAE",
    "0974": "カタール",
    "0972": "イスラエル",
    "0962": "ヨルダン",
    "0968": "オマーン",
    "0973": "バーレーン",
    "0965": "クウェート",
    "0966": "サウジアラビア",
    "0098": "イラン",
    "0964": "イラク",
    "0963": "シリア",
    "0961": "レバノン",
    "0967": "イエメン",
    "0093": "アフガニスタン",
    "0970": "パレスチナ",
    "0020": "エジプト",
    "0212": "モロッコ",
    "0213": "アルジェリア",
    "0218": "リビア",
    "0249": "スーダン",
    "0211": "南スーダン",
    "0027": "南アフリカ",
    "0254": "ケニア",
    "0255": "タンザニア",
    "0256": "ウガンダ",
    "0250": "ルワンダ",
    "0251": "エチオピア",
    "0252": "ソマリア",
    "0253": "ジブチ",
    "0257": "ブルンジ",
    "0258": "モザンビーク",
    "0260": "ザンビア",
    "0261": "マダガスカル",
    "0263": "ジンバブエ",
    "0264": "ナミビア",
    "0265": "マラウイ",
    "0266": "レソト",
    "0267": "ボツワナ",
    "0268": "エスワティニ",
    "0269": "コモロ",
    "0291": "エリトリア",
    "0248": "セーシェル",
    "0230": "モーリシャス",
    "0220": "ガンビア",
    "0222": "モーリタニア",
    "0223": "マリ",
    "0224": "ギニア",
    "0225": "コートジボワール",
    "0226": "ブルキナファソ",
    "0227": "ニジェール",
    "0228": "トーゴ",
    "0229": "ベナン",
    "0231": "リベリア",
    "0232": "シエラレオネ",
    "0233": "ガーナ",
    "0234": "ナイジェリア",
    "0235": "チャド",
    "0236": "中央アフリカ",
    "0237": "カメルーン",
    "0238": "カーボベルデ",
    "0239": "サントメ・プリンシペ",
    "0240": "赤道ギニア",
    "0241": "ガボン",
    "0242": "コンゴ共和国",
    "0243": "コンゴ民主共和国",
    "0244": "アンゴラ",
    "0245": "ギニアビサウ",
    "0216": "チュニジア",
    "0221": "セネガル",
})

# English name -> MOFA country code, for names produced by an upstream AI step.
# The first name listed for a code is the one used for English lookups.
ENGLISH_NAME_TO_CODE: Mapping[str, str] = MappingProxyType({
    "United States": "1000",
    "United States of America": "1000",
    "USA": "1000",
    "America": "1000",
    "Hawaii": "1808",
    "Canada": "9001",
    "South Korea": "0082",
    "Korea": "0082",
    "Republic of Korea": "0082",
    "China": "0086",
    "People's Republic of China": "0086",
    "Taiwan": "0886",
    "Thailand": "0066",
    "Vietnam": "0084",
    "Viet Nam": "0084",
    "Singapore": "0065",
    "Malaysia": "0060",
    "Indonesia": "0062",
    "Philippines": "0063",
    "Cambodia": "0855",
    "India": "0091",
    "Australia": "0061",
    "New Zealand": "0064",
    "United Kingdom": "0044",
    "UK": "0044",
    "Great Britain": "0044",
    "France": "0033",
    "Germany": "0049",
    "Italy": "0039",
    "Spain": "0034",
    "Portugal": "0351",
    "Netherlands": "0031",
    "Belgium": "0032",
    "Switzerland": "0041",
    "Austria": "0043",
    "Czech Republic": "0420",
    "Czechia": "0420",
    "Poland": "0048",
    "Hungary": "0036",
    "Greece": "0030",
    "Turkey": "0090",
    "Türkiye": "0090",
    "Croatia": "0385",
    "Finland": "0358",
    "Sweden": "0046",
    "Norway": "0047",
    "Denmark": "0045",
    "Ireland": "0353",
    "Iceland": "0354",
    "Russia": "9007",
    "Russian Federation": "9007",
    "Ukraine": "0380",
    "Mexico": "0052",
    "Brazil": "0055",
    "Argentina": "0054",
    "Peru": "0051",
    "Chile": "0056",
    "Cuba": "0053",
    "Costa Rica": "0506",
    "United Arab Emirates": "0971",
    "UAE": "0971",
    "Qatar": "0974",
    "Israel": "0972",
    "Jordan": "0962",
    "Oman": "0968",
    "Bahrain": "0973",
    "Kuwait": "0965",
    "Saudi Arabia": "0966",
    "Egypt": "0020",
    "Morocco": "0212",
    "South Africa": "0027",
    "Kenya": "0254",
    "Tanzania": "0255",
    "Ethiopia": "0251",
    "Ghana": "0233",
    "Nigeria": "0234",
    "Tunisia": "0216",
    "Senegal": "0221",
    "Guam": "1002",
    "Saipan": "1001",
    "Northern Mariana Islands": "1001",
    "Fiji": "0679",
    "Palau": "0680",
    "French Polynesia": "9689",
    "Tahiti": "9689",
    "New Caledonia": "0687",
    "Hong Kong": "0852",
    "Macau": "0853",
    "Macao": "0853",
    "Myanmar": "0095",
    "Burma": "0095",
    "Laos": "0856",
    "Lao People's Democratic Republic": "0856",
    "Brunei": "0673",
    "Nepal": "0977",
    "Sri Lanka": "0094",
    "Bangladesh": "0880",
    "Pakistan": "0092",
    "Mongolia": "0976",
})


def _first_name_per_code(table: Mapping[str, str]) -> dict[str, str]:
    names: dict[str, str] = {}
    for name, code in table.items():
        names.setdefault(code, name)
    return names


COUNTRY_CODE_TO_ENGLISH_NAME: Mapping[str, str] = MappingProxyType(
    _first_name_per_code(ENGLISH_NAME_TO_CODE)
)

EMERGENCY_CONTACTS_BY_COUNTRY: Mapping[str, tuple[EmergencyContact, ...]] = MappingProxyType({
    "0066": (
        EmergencyContact(name="警察", number="191"),
        EmergencyContact(name="救急車", number="1669"),
        EmergencyContact(name="ツーリストポリス", number="1155"),
    ),
    "0063": (
        EmergencyContact(name="警察", number="117"),
        EmergencyContact(name="救急・消防", number="911"),
    ),
    "0084": (
        EmergencyContact(name="警察", number="113"),
        EmergencyContact(name="救急", number="115"),
        EmergencyContact(name="消防", number="114"),
    ),
    "0065": (
        EmergencyContact(name="警察", number="999"),
        EmergencyContact(name="救急・消防", number="995"),
    ),
    "0082": (
        EmergencyContact(name="警察", number="112"),
        EmergencyContact(name="救急・消防", number="119"),
        EmergencyContact(name="観光案内", number="1330"),
    ),
    "0086": (
        EmergencyContact(name="警察", number="110"),
        EmergencyContact(name="救急", number="120"),
        EmergencyContact(name="消防", number="119"),
    ),
    "0886": (
        EmergencyContact(name="警察", number="110"),
        EmergencyContact(name="救急・消防", number="119"),
    ),
    "1000": (
        EmergencyContact(name="緊急通報（警察・消防・救急）", number="911"),
    ),
    "1808": (
        EmergencyContact(name="緊急通報（警察・消防・救急）", number="911"),
    ),
    "1002": (
        EmergencyContact(name="緊急通報（警察・消防・救急）", number="911"),
    ),
    "1001": (
        EmergencyContact(name="緊急通報（警察・消防・救急）", number="911"),
    ),
    "9001": (
        EmergencyContact(name="緊急通報（警察・消防・救急）", number="911"),
    ),
    "0044": (
        EmergencyContact(name="緊急通報（警察・消防・救急）", number="999"),
        EmergencyContact(name="EU緊急通報", number="112"),
    ),
    "0033": (
        EmergencyContact(name="警察", number="17"),
        EmergencyContact(name="救急", number="15"),
        EmergencyContact(name="消防", number="18"),
        EmergencyContact(name="EU緊急通報", number="112"),
    ),
    "0049": (
        EmergencyContact(name="警察", number="110"),
        EmergencyContact(name="救急・消防", number="112"),
    ),
    "0039": (
        EmergencyContact(name="警察", number="113"),
        EmergencyContact(name="救急", number="118"),
        EmergencyContact(name="消防", number="115"),
        EmergencyContact(name="EU緊急通報", number="112"),
    ),
    "0061": (
        EmergencyContact(name="緊急通報（警察・消防・救急）", number="000"),
    ),
})

DEFAULT_EMERGENCY_CONTACTS: tuple[EmergencyContact, ...] = (
    EmergencyContact(name="外務省領事サービスセンター", number="+81-3-5501-8162"),
    EmergencyContact(
        name="在外公館連絡先検索", number="https://www.mofa.go.jp/mofaj/annai/zaigai/"
    ),
)

# Japanese embassies and consulates general
EMBASSIES_BY_COUNTRY: Mapping[str, Embassy] = MappingProxyType({
    "0066": Embassy(
        name="在タイ日本国大使館",
        address="177 Witthayu Road, Lumphini, Pathum Wan, Bangkok 10330",
        phone="+66-2-207-8500",
    ),
    "0063": Embassy(
        name="在フィリピン日本国大使館",
        address="2627 Roxas Boulevard, Pasay City, Metro Manila",
        phone="+63-2-8551-5710",
    ),
    "0084": Embassy(
        name="在ベトナム日本国大使館",
        address="27 Lieu Giai, Ba Dinh, Hanoi",
        phone="+84-24-3846-3000",
    ),
    "0065": Embassy(
        name="在シンガポール日本国大使館",
        address="16 Nassim Road, Singapore 258390",
        phone="+65-6235-8855",
    ),
    "0082": Embassy(
        name="在大韓民国日本国大使館",
        address="22-gil 6, Yulgok-ro, Jongno-gu, Seoul",
        phone="+82-2-2170-5200",
    ),
    "0086": Embassy(
        name="在中華人民共和国日本国大使館",
        address="1 Liangmaqiao Dongjie, Chaoyang District, Beijing 100600",
        phone="+86-10-8531-9800",
    ),
    "1000": Embassy(
        name="在アメリカ合衆国日本国大使館",
        address="2520 Massachusetts Avenue, N.W., Washington, D.C. 20008",
        phone="+1-202-238-6700",
    ),
    "1808": Embassy(
        name="在ホノルル日本国総領事館",
        address="1742 Nuuanu Avenue, Honolulu, HI 96817",
        phone="+1-808-543-3111",
    ),
    "1002": Embassy(
        name="在ハガッニャ日本国総領事館",
        address="Suite 604, ITC Building, 590 South Marine Corps Drive, Tamuning, Guam 96913",
        phone="+1-671-646-1290",
    ),
    "9001": Embassy(
        name="在カナダ日本国大使館",
        address="255 Sussex Drive, Ottawa, Ontario K1N 9E6",
        phone="+1-613-241-8541",
    ),
    "0044": Embassy(
        name="在英国日本国大使館",
        address="101-104 Piccadilly, London W1J 7JT",
        phone="+44-20-7465-6500",
    ),
    "0033": Embassy(
        name="在フランス日本国大使館",
        address="7 Avenue Hoche, 75008 Paris",
        phone="+33-1-48-88-62-00",
    ),
})
